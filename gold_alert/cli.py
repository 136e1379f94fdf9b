"""
CLI commands for gold price alerts.
"""

import argparse
import asyncio
import logging
import os
import sys
import webbrowser
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from gold_alert.config import load_config
from gold_alert.controller import AlertController
from gold_alert.dashboard import (
    alerts_sent,
    render_logs,
    render_result,
    render_schedule,
)
from gold_alert.main import GoldAlertApp, setup_logging
from gold_alert.scheduler.cron import build_cron, describe_cron
from gold_alert.storage.connection import Database
from gold_alert.storage.models import FREQUENCIES, UNITS, SettingsValidationError

logger = logging.getLogger(__name__)


class ConsoleRecoveryPolicy:
    """Recovery policy for an interactive terminal session."""

    def redirect(self, url: str) -> None:
        """Open the redirect target (usually a login page) in a browser."""
        logger.warning(f"Session expired, redirected to {url}")
        print(f"Session expired. Continue at: {url}")
        webbrowser.open(url)

    def confirm_reload(self, message: str) -> bool:
        """Ask whether to rerun the command. Non-interactive sessions decline."""
        if not sys.stdin.isatty():
            print(message, file=sys.stderr)
            return False
        answer = input(f"{message}\n\nReload? [y/N] ")
        return answer.strip().lower() in ("y", "yes")

    def reload(self) -> None:
        """Rerun the current command from scratch."""
        os.execv(sys.executable, [sys.executable] + sys.argv)


def format_settings(controller: AlertController) -> str:
    """Render the current alert settings."""
    settings = controller.settings
    cron = build_cron(settings.frequency, settings.trigger_time)
    if settings.threshold_enabled:
        threshold = f"above {settings.threshold_above or '--'}, below {settings.threshold_below or '--'}"
    else:
        threshold = "disabled"
    return "\n".join([
        f"Recipients:        {', '.join(settings.recipient_emails) or 'none'}",
        f"Frequency:         {settings.frequency} at {settings.trigger_time} ({describe_cron(cron)})",
        f"Timezone:          {settings.timezone}",
        f"Threshold:         {threshold}",
        f"Unit:              {settings.unit}",
    ])


def apply_settings_args(controller: AlertController, args: argparse.Namespace) -> None:
    """Apply `settings set` options to the in-memory settings."""
    changes = {}
    if args.frequency is not None:
        changes["frequency"] = args.frequency
    if args.time is not None:
        changes["trigger_time"] = args.time
    if args.timezone is not None:
        changes["timezone"] = args.timezone
    if args.unit is not None:
        changes["unit"] = args.unit
    if args.above is not None:
        changes["threshold_above"] = args.above
    if args.below is not None:
        changes["threshold_below"] = args.below
    if args.threshold is not None:
        changes["threshold_enabled"] = args.threshold
    controller.update_settings(**changes)


def print_notification(controller: AlertController) -> int:
    """Print the live notification. Returns the exit code it implies."""
    notification = controller.notification
    if notification is None:
        return 0
    if notification.type == "error":
        print(f"Error: {notification.message}", file=sys.stderr)
        return 1
    print(notification.message)
    return 0


async def run_command(app: GoldAlertApp, args: argparse.Namespace) -> int:
    """Run a parsed command against the app."""
    controller = app.controller
    await controller.load()

    if args.command == "status":
        print(render_schedule(controller.manager.schedule))
        print(f"Alerts sent:       {alerts_sent(controller.logs)}")
        print()
        print(format_settings(controller))
        return 0

    if args.command == "check":
        await controller.check_now()
        code = print_notification(controller)
        if controller.last_result is not None:
            print()
            print(render_result(controller.last_result))
        return code

    if args.command == "toggle":
        if controller.manager.schedule is None:
            print("Error: no schedule loaded", file=sys.stderr)
            return 1
        await controller.toggle_schedule()
        code = print_notification(controller)
        print(render_schedule(controller.manager.schedule))
        return code

    if args.command == "logs":
        if args.limit != controller.log_limit:
            controller.log_limit = args.limit
            await controller.refresh_logs()
        print(render_logs(controller.logs))
        return 0

    if args.command == "save":
        await controller.save_settings()
        return print_notification(controller)

    if args.command == "settings":
        if args.action == "set":
            apply_settings_args(controller, args)
            controller.settings.validate()
        elif args.action != "show":
            return 2
    elif args.command == "recipients":
        if args.action == "add":
            for email in args.emails:
                if not controller.add_recipient(email):
                    print(f"Skipped: {email}", file=sys.stderr)
        elif args.action == "remove":
            for email in args.emails:
                if not controller.remove_recipient(email):
                    print(f"Not found: {email}", file=sys.stderr)
        else:
            return 2
    else:
        return 2

    # Settings edits
    if getattr(args, "action", None) != "show":
        if getattr(args, "save", False):
            await controller.save_settings()
            code = print_notification(controller)
            if code:
                return code
        else:
            app.repository.save_settings(controller.settings)
            print("Settings stored. Run `save` to update the schedule.")
    print(format_settings(controller))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gold price alert CLI")
    parser.add_argument("--config", default="config.yaml", help="Path to config file")
    parser.add_argument("--db", help="Database path (overrides config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show schedule status and settings")
    subparsers.add_parser("check", help="Check the gold price now")
    subparsers.add_parser("toggle", help="Pause or resume the schedule")
    subparsers.add_parser("save", help="Save settings and replace the schedule")

    logs_parser = subparsers.add_parser("logs", help="Show execution history")
    logs_parser.add_argument("--limit", type=int, default=20, help="Number of runs")

    # Settings commands
    settings_parser = subparsers.add_parser("settings", help="Alert settings")
    settings_subparsers = settings_parser.add_subparsers(dest="action")
    settings_subparsers.add_parser("show", help="Show settings")

    set_parser = settings_subparsers.add_parser("set", help="Change settings")
    set_parser.add_argument("--frequency", choices=FREQUENCIES)
    set_parser.add_argument("--time", help="Trigger time as HH:MM")
    set_parser.add_argument("--timezone", help="IANA timezone")
    set_parser.add_argument("--unit", choices=UNITS)
    set_parser.add_argument("--above", help="Alert above this price")
    set_parser.add_argument("--below", help="Alert below this price")
    set_parser.add_argument(
        "--threshold", action=argparse.BooleanOptionalAction, default=None,
        help="Enable or disable the price threshold",
    )
    set_parser.add_argument("--save", action="store_true", help="Also update the schedule")

    # Recipient commands
    recipients_parser = subparsers.add_parser("recipients", help="Alert recipients")
    recipients_subparsers = recipients_parser.add_subparsers(dest="action")
    for action in ("add", "remove"):
        action_parser = recipients_subparsers.add_parser(action, help=f"{action.title()} recipients")
        action_parser.add_argument("emails", nargs="+", help="Email addresses")
        action_parser.add_argument("--save", action="store_true", help="Also update the schedule")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    config = load_config(args.config)
    setup_logging(config.advanced.log_level, debug=args.debug)

    # Initialize database
    db = Database(args.db or config.database.path)
    db.initialize()

    app = GoldAlertApp(config, db, recovery=ConsoleRecoveryPolicy())
    try:
        return asyncio.run(run_command(app, args))
    except SettingsValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"Something went wrong: {e}", file=sys.stderr)
        return 1
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
