"""
Test fixtures and utilities for job tracker tests
"""

from types import SimpleNamespace
from unittest import mock
import io
import logging

import pytest
from docx import Document

from job_tracker.core.models import JobRecord
from job_tracker.integrations.job_scraper import JobDescriptionFetcher
from job_tracker.matching.match_scorer import MatchScorer
from job_tracker.storage.resume_storage import ResumeStorage
from job_tracker.tracker.job_store import JobStore
from job_tracker.utils.config import FetcherSettings, ScorerSettings, StorageSettings


RESUME_LINES = [
    "Jane Doe - Senior Backend Engineer",
    "Seven years building Python services with Django, FastAPI and PostgreSQL.",
    "Designed event-driven pipelines on Kafka processing two million events a day.",
    "Led a team of four engineers migrating a monolith to containerized services.",
    "Skills: Python, SQL, Docker, Kubernetes, AWS, Terraform, Redis, CI/CD.",
    "Education: BSc Computer Science, University of Somewhere.",
]

JOB_DESCRIPTION_HTML = """
<html>
  <head><title>Backend Engineer - Acme</title><script>var tracking = 1;</script></head>
  <body>
    <nav>Home | Jobs | About</nav>
    <div class="job-description">
      <h2>Backend Engineer</h2>
      <p>We are looking for a backend engineer with strong Python experience.</p>
      <ul>
        <li>Build and operate services on AWS</li>
        <li>Own PostgreSQL schemas and query performance</li>
        <li>Work with Kafka based event pipelines</li>
      </ul>
    </div>
    <footer>Copyright Acme</footer>
  </body>
</html>
"""


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[list[str]]) -> bytes:
    """Build a small text PDF, one list of lines per page."""
    objects = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }

    page_ids = []
    for index, lines in enumerate(pages):
        page_id = 4 + index * 2
        content_id = page_id + 1
        page_ids.append(page_id)

        body = " ".join(f"({_pdf_escape(line)}) Tj T*" for line in lines)
        stream = f"BT /F1 11 Tf 14 TL 72 740 Td {body} ET".encode("latin-1")
        objects[content_id] = (
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )
        objects[page_id] = (
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode("latin-1")

    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects[2] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>".encode("latin-1")

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in sorted(objects):
        offsets[obj_id] = len(out)
        out += b"%d 0 obj\n" % obj_id + objects[obj_id] + b"\nendobj\n"

    xref_at = len(out)
    size = max(objects) + 1
    out += b"xref\n0 %d\n" % size
    out += b"0000000000 65535 f \n"
    for obj_id in range(1, size):
        out += b"%010d 00000 n \n" % offsets[obj_id]
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (size, xref_at)

    return bytes(out)


def build_docx(paragraphs: list[str], table: list[list[str]] = None) -> bytes:
    """Build a DOCX file in memory."""
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)

    if table:
        grid = doc.add_table(rows=len(table), cols=len(table[0]))
        for row, values in zip(grid.rows, table):
            for cell, value in zip(row.cells, values):
                cell.text = value

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def model_reply(text: str) -> SimpleNamespace:
    """Shape of an Anthropic Messages API response with one text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def html_response(html: str, status_code: int = 200, reason: str = "OK") -> mock.MagicMock:
    response = mock.MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.headers = {"Content-Type": "text/html; charset=utf-8"}
    response.encoding = "utf-8"
    response.iter_content.return_value = [html.encode("utf-8")]
    return response


@pytest.fixture
def resume_pdf():
    return build_pdf([RESUME_LINES[:3], RESUME_LINES[3:]])


@pytest.fixture
def resume_docx():
    return build_docx(RESUME_LINES[:4], table=[["Skills", "Python, SQL, Docker"]])


@pytest.fixture
def job_store(tmp_path):
    return JobStore(str(tmp_path / "jobs"))


@pytest.fixture
def resume_storage(tmp_path):
    return ResumeStorage(StorageSettings(root_dir=str(tmp_path / "storage")))


@pytest.fixture
def fetcher_settings():
    return FetcherSettings(timeout_seconds=5.0)


@pytest.fixture
def fetcher(fetcher_settings):
    return JobDescriptionFetcher(fetcher_settings)


@pytest.fixture
def scorer_settings():
    return ScorerSettings(api_key="test-api-key")


@pytest.fixture
def anthropic_client():
    """Stand-in Anthropic client answering "7"."""
    client = mock.MagicMock()
    client.messages.create.return_value = model_reply("7")
    return client


@pytest.fixture
def scorer(scorer_settings, anthropic_client):
    return MatchScorer(scorer_settings, client=anthropic_client)


@pytest.fixture
def make_job(job_store):
    """Create and store a job record."""
    def _make(**fields):
        fields.setdefault("company_name", "Acme")
        fields.setdefault("job_title", "Backend Engineer")
        return job_store.create(JobRecord(**fields))
    return _make


@pytest.fixture
def restore_root_logger():
    """Undo root logger changes made by setup_logging."""
    root = logging.getLogger()
    level = root.level
    with mock.patch.object(root, "handlers", []):
        yield root
        for handler in root.handlers:
            handler.close()
    root.setLevel(level)
