"""
Daily Agenda command line.

Usage:
    daily-agenda fetch [--date 2024-03-15] [--note ~/notes/today.md]
    daily-agenda auth-url [--open]
    daily-agenda exchange <code>
    daily-agenda status
    daily-agenda set-client --client-id <id> --client-secret <secret>
    daily-agenda sources list
    daily-agenda sources add <calendar-id> [--label Work]
    daily-agenda sources remove <position>
    daily-agenda sources move <position> {up,down}
"""

import argparse
import datetime
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional

from daily_agenda.core.config_manager import Config
from daily_agenda.core.exceptions import AgendaError
from daily_agenda.core.orchestrator import AgendaOrchestrator, OrchestratorFactory, today_utc
from daily_agenda.models import add_source, move_source, remove_source
from daily_agenda.services.document_sink import MarkdownFileSink, StdoutSink
from daily_agenda.services.notifier import ConsoleNotifier
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_date(value: str) -> datetime.date:
    """Parse a user-entered date using the accepted formats."""
    value = value.strip()
    if value.lower() == "today":
        return today_utc()
    for fmt, pattern in Config.DATE_PATTERNS:
        if pattern.match(value):
            try:
                return datetime.datetime.strptime(value, fmt).date()
            except ValueError:
                continue
    raise argparse.ArgumentTypeError(f"Unrecognized date: {value!r} (expected YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daily-agenda",
        description="Insert a day's Google Calendar events into a Markdown note",
    )
    parser.add_argument("--settings", type=Path, help="Settings file (default: %(default)s)",
                        default=Config.SETTINGS_FILE)
    commands = parser.add_subparsers(dest="command", required=True)

    fetch = commands.add_parser("fetch", help="Fetch events for a day")
    fetch.add_argument("--date", type=parse_date, help="Day to fetch (default: today, UTC)")
    fetch.add_argument("--note", type=Path, help="Markdown note to insert into (default: stdout)")

    auth_url = commands.add_parser("auth-url", help="Print the Google consent URL")
    auth_url.add_argument("--open", action="store_true", help="Open the URL in a browser")

    exchange = commands.add_parser("exchange", help="Exchange an authorization code for tokens")
    exchange.add_argument("code")

    commands.add_parser("status", help="Show authentication status")

    set_client = commands.add_parser("set-client", help="Store the OAuth client id and secret")
    set_client.add_argument("--client-id", required=True)
    set_client.add_argument("--client-secret", required=True)

    sources = commands.add_parser("sources", help="Manage the calendar list")
    source_commands = sources.add_subparsers(dest="action", required=True)
    source_commands.add_parser("list", help="Show configured calendars")
    add = source_commands.add_parser("add", help="Add a calendar")
    add.add_argument("calendar_id")
    add.add_argument("--label", default="")
    remove = source_commands.add_parser("remove", help="Remove a calendar")
    remove.add_argument("position", type=int)
    move = source_commands.add_parser("move", help="Move a calendar up or down")
    move.add_argument("position", type=int)
    move.add_argument("direction", choices=["up", "down"])

    return parser


def _run_sources(orchestrator: AgendaOrchestrator, args: argparse.Namespace) -> int:
    sources = orchestrator.settings.sources

    if args.action == "list":
        if not sources:
            print("No calendars configured.")
        for source in sources:
            label = f" [{source.label}]" if source.label else ""
            print(f"{source.order}: {source.id}{label}")
        return 0

    try:
        if args.action == "add":
            updated = add_source(sources, args.calendar_id, args.label)
        elif args.action == "remove":
            updated = remove_source(sources, args.position)
        else:
            updated = move_source(sources, args.position, -1 if args.direction == "up" else 1)
    except (ValueError, IndexError) as e:
        orchestrator.notifier.error(str(e))
        return 1

    orchestrator.update_sources(updated)
    orchestrator.notifier.success(f"{len(updated)} calendar(s) configured")
    return 0


def run(args: argparse.Namespace) -> int:
    notifier = ConsoleNotifier()
    sink = MarkdownFileSink(args.note) if getattr(args, "note", None) else StdoutSink()
    orchestrator = OrchestratorFactory.create(sink, notifier, settings_path=args.settings)

    if args.command == "fetch":
        return 0 if orchestrator.insert_events_for(args.date) else 1

    if args.command == "auth-url":
        url = orchestrator.authorization_url()
        if not url:
            return 1
        print(url)
        if args.open:
            webbrowser.open(url)
            notifier.info("Google login page opened in your browser. Copy the authorization code "
                          "and run 'daily-agenda exchange <code>'.")
        return 0

    if args.command == "exchange":
        return 0 if orchestrator.exchange_code(args.code) else 1

    if args.command == "status":
        print(orchestrator.status())
        for problem in Config.validate(orchestrator.settings):
            notifier.warning(problem)
        return 0

    if args.command == "set-client":
        orchestrator.set_client(args.client_id, args.client_secret)
        return 0

    return _run_sources(orchestrator, args)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except AgendaError as e:
        logger.error(str(e))
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1
    except Exception as e:
        logger.error("Unexpected fatal error", exc_info=True)
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
