"""
Job Tracker CLI - Command line interface for the job tracking application.

Usage:
    python -m job_tracker [command] [options]

Commands:
    add         Add a job (optionally with a resume) to the board
    update      Edit a job
    move        Move a job to another board column
    attach      Attach or replace the resume of a job
    delete      Delete a job
    list        List jobs
    show        Show one job
    board       Show the kanban board
    score       Recalculate the match score of a job
    stats       Show statistics
    export      Export jobs to CSV
    config      Manage configuration

Examples:
    python -m job_tracker add --company "Acme" --title "Backend Engineer" \\
        --link "https://example.com/jobs/123" --resume ./resume.pdf
    python -m job_tracker move 3f2a... technical
    python -m job_tracker score 3f2a...
    python -m job_tracker board
"""

from pathlib import Path
import argparse
import json
import sys

from job_tracker.core.errors import JobNotFoundError, JobValidationError, MatchScoreError
from job_tracker.core.job_service import JobService
from job_tracker.core.models import JobPriority, JobStatus
from job_tracker.tracker.board import format_match_score, render_board
from job_tracker.utils.config import Config
from job_tracker.utils.logging_utils import setup_logging


STATUS_CHOICES = [s.value for s in JobStatus]
PRIORITY_CHOICES = [p.value for p in JobPriority]


def _add_job_field_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--company", "-c", help="Company name")
    parser.add_argument("--title", "-t", help="Job title")
    parser.add_argument("--link", "-l", help="Application link (job posting URL)")
    parser.add_argument("--platform", help="Platform applied through")
    parser.add_argument("--city", help="Job location")
    parser.add_argument("--salary", help="Salary range")
    parser.add_argument("--priority", "-p", choices=PRIORITY_CHOICES)
    parser.add_argument("--status", "-s", choices=STATUS_CHOICES)
    parser.add_argument("--date-applied", help="Date applied (YYYY-MM-DD)")
    parser.add_argument("--notes", "-n", help="Notes")


def _job_fields(args) -> dict:
    mapping = {
        "company_name": args.company,
        "job_title": args.title,
        "application_link": args.link,
        "platform": args.platform,
        "city": args.city,
        "salary_range": args.salary,
        "priority": args.priority,
        "status": args.status,
        "date_applied": args.date_applied,
        "notes": args.notes,
    }
    return {key: value for key, value in mapping.items() if value is not None}


def _read_resume(path: str) -> tuple[bytes, str]:
    resume_path = Path(path)
    if not resume_path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return resume_path.read_bytes(), resume_path.name


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Job Tracker - Kanban job application tracking with AI match scores",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also log to this file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a job")
    _add_job_field_arguments(add_parser)
    add_parser.add_argument("--resume", "-r", help="Resume file (.pdf, .docx, .doc)")

    # Update command
    update_parser = subparsers.add_parser("update", help="Edit a job")
    update_parser.add_argument("job_id", help="Job ID")
    _add_job_field_arguments(update_parser)

    # Move command
    move_parser = subparsers.add_parser("move", help="Move a job to another column")
    move_parser.add_argument("job_id", help="Job ID")
    move_parser.add_argument("status", choices=STATUS_CHOICES)

    # Attach command
    attach_parser = subparsers.add_parser("attach", help="Attach a resume to a job")
    attach_parser.add_argument("job_id", help="Job ID")
    attach_parser.add_argument("resume", help="Resume file (.pdf, .docx, .doc)")

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a job")
    delete_parser.add_argument("job_id", help="Job ID")

    # List command
    list_parser = subparsers.add_parser("list", help="List jobs")
    list_parser.add_argument("--status", "-s", choices=STATUS_CHOICES, help="Filter by status")
    list_parser.add_argument("--search", "-q", help="Filter by company or title")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a job")
    show_parser.add_argument("job_id", help="Job ID")

    # Board command
    board_parser = subparsers.add_parser("board", help="Show the kanban board")
    board_parser.add_argument("--output", "-o", help="Write the board to a markdown file")

    # Score command
    score_parser = subparsers.add_parser("score", help="Recalculate a match score")
    score_parser.add_argument("job_id", help="Job ID")

    # Stats command
    subparsers.add_parser("stats", help="Show statistics")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export jobs to CSV")
    export_parser.add_argument("--output", "-o", help="CSV file path")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set a config value")
    config_parser.add_argument("--set-api-key", nargs=2, metavar=("PROVIDER", "KEY"), help="Set API key")
    config_parser.add_argument("--init", action="store_true", help="Initialize default config")

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(verbose=args.verbose, log_file=args.log_file)
    config = Config(args.config)

    if args.command == "config":
        cmd_config(args, config)
        return

    commands = {
        "add": cmd_add,
        "update": cmd_update,
        "move": cmd_move,
        "attach": cmd_attach,
        "delete": cmd_delete,
        "list": cmd_list,
        "show": cmd_show,
        "board": cmd_board,
        "score": cmd_score,
        "stats": cmd_stats,
        "export": cmd_export,
    }

    service = JobService.from_config(config)

    # Execute command
    try:
        commands[args.command](args, service)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        sys.exit(1)
    except MatchScoreError as e:
        where = f" ({e.stage})" if e.stage else ""
        print(f"\n❌ {e.kind}{where}: {e}")
        sys.exit(1)
    except (JobValidationError, FileNotFoundError) as e:
        print(f"\n❌ {e}")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        # Background score runs finish before the process exits
        service.close()


def cmd_add(args, service: JobService):
    """Execute add command."""
    resume = _read_resume(args.resume) if args.resume else None
    job = service.create_job(_job_fields(args), resume=resume)

    print(f"✅ Added {job.job_title} at {job.company_name}")
    print(f"   ID: {job.id}")
    if job.can_be_scored:
        print("   🎯 Calculating match score in the background...")


def cmd_update(args, service: JobService):
    """Execute update command."""
    fields = _job_fields(args)
    if not fields:
        print("Nothing to update. Pass at least one field option.")
        return

    job = service.update_job(args.job_id, fields)
    print(f"✅ Updated {job.job_title} at {job.company_name}")
    if job.can_be_scored:
        print("   🎯 Recalculating match score in the background...")


def cmd_move(args, service: JobService):
    """Execute move command."""
    job = service.move_job(args.job_id, args.status)
    print(f"✅ Moved {job.company_name} to '{job.status.label}'")


def cmd_attach(args, service: JobService):
    """Execute attach command."""
    data, file_name = _read_resume(args.resume)
    job = service.attach_resume(args.job_id, data, file_name)
    print(f"✅ Attached {file_name} to {job.company_name} ({job.resume_file_path})")
    if job.can_be_scored:
        print("   🎯 Calculating match score in the background...")


def cmd_delete(args, service: JobService):
    """Execute delete command."""
    if service.delete_job(args.job_id):
        print(f"✅ Deleted job {args.job_id}")
    else:
        print(f"❌ Job {args.job_id} not found")


def cmd_list(args, service: JobService):
    """Execute list command."""
    if args.search:
        jobs = service.search_jobs(args.search)
        if args.status:
            jobs = [job for job in jobs if job.status.value == args.status]
    else:
        jobs = service.list_jobs(JobStatus(args.status) if args.status else None)

    print(f"\n📋 Jobs ({len(jobs)} total)\n")
    print("-" * 80)

    for job in jobs:
        print(f"\n{job.company_name} - {job.job_title}")
        print(f"   Status: {job.status.label} | Priority: {job.priority.value.title()}")
        print(f"   Match: {format_match_score(job.match_score)}")
        print(f"   ID: {job.id}")


def cmd_show(args, service: JobService):
    """Execute show command."""
    try:
        job = service.get_job(args.job_id)
    except JobNotFoundError:
        print(f"❌ Job {args.job_id} not found")
        return
    print(json.dumps(job.to_dict(), indent=2))


def cmd_board(args, service: JobService):
    """Execute board command."""
    content = render_board(service.list_jobs())

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(content)
        print(f"✅ Board written to {args.output}")
    else:
        print(content)


def cmd_score(args, service: JobService):
    """Execute score command."""
    print(f"🎯 Calculating match score for job {args.job_id}...")
    result = service.recalculate_match_score(args.job_id)
    print(f"\n✅ Match score: {format_match_score(result.score)}")


def cmd_stats(args, service: JobService):
    """Execute stats command."""
    stats = service.store.get_statistics()
    print("\n📊 Job Statistics")
    print("=" * 40)
    print(f"Total Jobs: {stats['total']}")
    print(f"Scored Jobs: {stats['scored']}")
    print(f"Average Match Score: {stats['average_match_score']:.1f}/10")
    print("\nBy Status:")
    for status, count in stats.get('by_status', {}).items():
        print(f"  {status.replace('_', ' ').title()}: {count}")


def cmd_export(args, service: JobService):
    """Execute export command."""
    path = service.store.export_to_csv(args.output)
    print(f"✅ Exported to {path}")


def cmd_config(args, config: Config):
    """Execute config command."""
    if args.init:
        config.save()
        print(f"✅ Created config at: {config.config_path}")

    elif args.show:
        print("\n📋 Current Configuration\n")
        config.print_config()

    elif args.set:
        key, value = args.set
        # Try to parse as JSON for complex values
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config.set(key, value)
        config.save()
        print(f"✅ Set {key} = {value}")

    elif args.set_api_key:
        provider, key = args.set_api_key
        config.set_api_key(provider, key)
        print(f"✅ Set API key for {provider}")

    else:
        print("Use --show, --set, --set-api-key, or --init")


if __name__ == "__main__":
    main()
