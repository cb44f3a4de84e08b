"""Command-line entry point for the ATS notification service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError

from ats.calendar import CalendarError
from ats.config.environment import EnvironmentConfig
from ats.config.exceptions import ConfigurationError
from ats.config.loader import load_config
from ats.config.models import AppConfig
from ats.context import AppContext, build_context
from ats.domain.models import Application, Candidate, InterviewRequest, InterviewUpdate, JobPosting
from ats.logging import get_logger
from ats.logging.config import configure_logging
from ats.transports import MailConfigurationError
from ats.utils.timeout import OperationTimeoutError, run_with_timeout

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Args:
        config_path: Path to configuration file, or None to search defaults
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_check_config(ctx: AppContext, args: argparse.Namespace) -> int:
    env = ctx.env_config
    cal = ctx.app_config.calendar
    missing = ctx.oauth_client.missing_credentials()
    _print_json(
        {
            "organization": ctx.app_config.organization.name,
            "mail_transport": ctx.transport.name,
            "mock_emails": env.mock_emails,
            "sendgrid_api_key": "set" if env.sendgrid_api_key else "unset",
            "google_oauth": "set" if not missing else f"missing {', '.join(missing)}",
            "calendar_id": cal.calendar_id,
            "timezone": cal.timezone,
            "interview_duration_minutes": cal.interview_duration_minutes,
            "request_timeout_seconds": ctx.request_timeout,
        }
    )
    return 0


def cmd_notify(ctx: AppContext, args: argparse.Namespace) -> int:
    application = Application(
        id=args.application_id,
        status=args.status,
        candidate=Candidate(
            first_name=args.first_name,
            last_name=args.last_name,
            name=args.name,
            email=args.email,
        ),
        job_posting=JobPosting(title=args.job_title, location_name=args.location),
    )
    result = run_with_timeout(
        ctx.notification_service.notify_status_change,
        ctx.request_timeout,
        application,
        args.previous_status,
    )
    _print_json(asdict(result))
    return 1 if result.is_failed() else 0


def cmd_send_email(ctx: AppContext, args: argparse.Namespace) -> int:
    message = args.message
    if args.message_file:
        message = args.message_file.read_text(encoding="utf-8")

    result = run_with_timeout(
        ctx.notification_service.send_custom_email,
        ctx.request_timeout,
        args.to,
        args.subject,
        message,
        args.application_id,
    )
    _print_json(asdict(result))
    return 1 if result.is_failed() else 0


def cmd_slots(ctx: AppContext, args: argparse.Namespace) -> int:
    result = run_with_timeout(
        ctx.availability_service.query_availability, ctx.request_timeout, args.date
    )
    if not result.ok:
        print(f"Could not read calendar: {result.error}", file=sys.stderr)
        return 1

    if args.json:
        _print_json([slot.to_dict() for slot in result.slots])
    else:
        for slot in result.slots:
            print(f"{slot.time:>8}  {'available' if slot.available else 'busy'}")
    return 0


def cmd_schedule(ctx: AppContext, args: argparse.Namespace) -> int:
    request = InterviewRequest(
        candidate_name=args.candidate_name,
        candidate_email=args.candidate_email,
        interviewer_name=args.interviewer_name,
        interviewer_email=args.interviewer_email,
        position=args.position,
        start=args.start,
        end=args.end,
        location=args.location,
        is_video_interview=args.video,
        notes=args.notes,
        application_id=args.application_id,
    )
    result = run_with_timeout(ctx.availability_service.create_event, ctx.request_timeout, request)
    _print_json(asdict(result))
    return 0


def cmd_reschedule(ctx: AppContext, args: argparse.Namespace) -> int:
    changes = InterviewUpdate(
        start=args.start,
        end=args.end,
        notes=args.notes,
        position=args.position,
        location=args.location,
        is_video_interview=args.video,
    )
    if changes.is_empty():
        print("Nothing to change: pass at least one option", file=sys.stderr)
        return 1

    result = run_with_timeout(
        ctx.availability_service.update_event, ctx.request_timeout, args.event_id, changes
    )
    _print_json(asdict(result))
    return 0


def cmd_cancel(ctx: AppContext, args: argparse.Namespace) -> int:
    cancelled = run_with_timeout(
        ctx.availability_service.cancel_event, ctx.request_timeout, args.event_id
    )
    _print_json({"event_id": args.event_id, "cancelled": cancelled})
    return 0 if cancelled else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ats-notify",
        description="ATS notifications - candidate status emails and interview scheduling",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check-config", help="Show the effective configuration")
    check.set_defaults(handler=cmd_check_config)

    notify = sub.add_parser("notify", help="Send the email for an application status change")
    notify.add_argument("--status", required=True, help="New application status")
    notify.add_argument("--previous-status", default=None, help="Status before the change")
    notify.add_argument("--email", required=True, help="Candidate email address")
    notify.add_argument("--job-title", required=True, help="Job posting title")
    notify.add_argument("--first-name")
    notify.add_argument("--last-name")
    notify.add_argument("--name", help="Full name when first/last are not known")
    notify.add_argument("--location", help="Job location")
    notify.add_argument("--application-id", type=int)
    notify.set_defaults(handler=cmd_notify)

    send = sub.add_parser("send-email", help="Send a custom branded email")
    send.add_argument("--to", required=True)
    send.add_argument("--subject", required=True)
    body = send.add_mutually_exclusive_group(required=True)
    body.add_argument("--message")
    body.add_argument("--message-file", type=Path)
    send.add_argument("--application-id", type=int)
    send.set_defaults(handler=cmd_send_email)

    slots = sub.add_parser("slots", help="List interview slots for a day")
    slots.add_argument("--date", type=date.fromisoformat, required=True, help="YYYY-MM-DD")
    slots.add_argument("--json", action="store_true", help="Print slots as JSON")
    slots.set_defaults(handler=cmd_slots)

    schedule = sub.add_parser("schedule", help="Create an interview event")
    schedule.add_argument("--candidate-name", required=True)
    schedule.add_argument("--candidate-email", required=True)
    schedule.add_argument("--interviewer-name", required=True)
    schedule.add_argument("--interviewer-email", required=True)
    schedule.add_argument("--position", required=True)
    schedule.add_argument("--start", type=datetime.fromisoformat, required=True)
    schedule.add_argument("--end", type=datetime.fromisoformat)
    schedule.add_argument("--location")
    schedule.add_argument("--video", action="store_true", help="Add a Google Meet link")
    schedule.add_argument("--notes")
    schedule.add_argument("--application-id", type=int)
    schedule.set_defaults(handler=cmd_schedule)

    reschedule = sub.add_parser("reschedule", help="Update an interview event")
    reschedule.add_argument("event_id")
    reschedule.add_argument("--start", type=datetime.fromisoformat)
    reschedule.add_argument("--end", type=datetime.fromisoformat)
    reschedule.add_argument("--notes")
    reschedule.add_argument("--position")
    reschedule.add_argument("--location")
    mode = reschedule.add_mutually_exclusive_group()
    mode.add_argument("--video", dest="video", action="store_const", const=True, default=None)
    mode.add_argument("--in-person", dest="video", action="store_const", const=False)
    reschedule.set_defaults(handler=cmd_reschedule)

    cancel = sub.add_parser("cancel", help="Cancel an interview event")
    cancel.add_argument("event_id")
    cancel.set_defaults(handler=cmd_cancel)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the ATS notification CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)
    handler: Callable[[AppContext, argparse.Namespace], int] = args.handler

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )
        logger.debug(
            "Configuration loaded",
            extra={"event": "config.loaded", "command": args.command, "env": repr(env_config)},
        )

        ctx = build_context(app_config, env_config)
        return handler(ctx, args)

    except (ConfigurationError, MailConfigurationError) as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": type(e).__name__},
        )
        return 1
    except ValidationError as e:
        print(f"Invalid input:\n{e}", file=sys.stderr)
        return 1
    except CalendarError as e:
        print(f"Calendar error: {e}", file=sys.stderr)
        return 1
    except OperationTimeoutError as e:
        print(f"Timed out: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Unexpected error",
            extra={
                "event": "cli.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
