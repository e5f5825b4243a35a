"""
Tests for the command line interface
"""

import json

import pytest

from conftest import build_docx
from job_tracker.cli import main


@pytest.fixture
def run_cli(tmp_path, monkeypatch, capsys, restore_root_logger):
    """Run the CLI against a config whose data lives in tmp_path."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "tracker": {"data_dir": str(tmp_path / "jobs")},
        "storage": {"resume_dir": str(tmp_path / "storage")},
    }), encoding="utf-8")

    def _run(*args):
        main(["--config", str(config_path), *args])
        return capsys.readouterr().out

    return _run


def _job_id(output: str) -> str:
    for line in output.splitlines():
        if line.strip().startswith("ID:"):
            return line.split("ID:")[1].strip()
    raise AssertionError(f"No job ID in output: {output}")


class TestCli:
    """Test CLI commands end to end"""

    def test_add_list_and_move(self, run_cli):
        job_id = _job_id(run_cli("add", "--company", "Acme", "--title", "Backend Engineer"))

        listing = run_cli("list")
        assert "Acme - Backend Engineer" in listing
        assert "Match: N/A" in listing

        assert "Moved Acme to 'Offer'" in run_cli("move", job_id, "offer")
        assert "## Offer (1)" in run_cli("board")

    def test_add_with_resume(self, run_cli, tmp_path):
        resume = tmp_path / "resume.docx"
        resume.write_bytes(build_docx(["Jane Doe", "Python engineer"]))

        job_id = _job_id(run_cli("add", "-c", "Acme", "-t", "Engineer", "--resume", str(resume)))

        shown = json.loads(run_cli("show", job_id))
        assert shown["resume_file_path"] == f"{job_id}/resume.docx"

    def test_validation_error_exits(self, run_cli, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("add", "--company", "Acme")

        assert exc_info.value.code == 1
        assert "required" in capsys.readouterr().out

    def test_score_reports_typed_error(self, run_cli, capsys):
        job_id = _job_id(run_cli("add", "-c", "Acme", "-t", "Engineer"))

        with pytest.raises(SystemExit):
            run_cli("score", job_id)

        out = capsys.readouterr().out
        assert "MissingResume" in out
        assert "check_resume" in out

    def test_delete_and_stats(self, run_cli):
        job_id = _job_id(run_cli("add", "-c", "Acme", "-t", "Engineer"))

        assert "Deleted" in run_cli("delete", job_id)
        assert "Total Jobs: 0" in run_cli("stats")

    def test_config_show_masks_key(self, run_cli):
        run_cli("config", "--set-api-key", "anthropic", "sk-ant-1234567890abcd")

        out = run_cli("config", "--show")

        assert "sk-ant-1234567890abcd" not in out
        assert "sk-a...abcd" in out
