# run.py
# Entry point. Config and wiring only, no logic lives here.
#
# Usage:
#   monitor-script create <monitor-id> --text "..." [--location AWS_US_EAST_1]
#   monitor-script read   <monitor-id>
#   monitor-script update <monitor-id> --file script.js [--location AWS_US_EAST_1]
#   monitor-script delete <monitor-id>
#   monitor-script import <monitor-id>

import argparse
from pathlib import Path

from monitor_script import display
from monitor_script.client import SyntheticsAPIError, SyntheticsClient
from monitor_script.config import ConfigError, Settings
from monitor_script.lifecycle import ScriptController, TamperDetectedError
from monitor_script.models import ScriptLocation, ScriptResource


def _script_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Plaintext script body.")
    source.add_argument("--file", type=Path, help="Read the script body from a file.")
    parser.add_argument("--location", help="Execution location to sign the script for.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monitor-script",
        description="Manage the script attached to a New Relic Synthetics monitor.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name in ("create", "update"):
        sub = commands.add_parser(name, help=f"{name.capitalize()} a monitor script.")
        sub.add_argument("monitor_id")
        _script_args(sub)

    for name in ("read", "delete", "import"):
        sub = commands.add_parser(name, help=f"{name.capitalize()} a monitor script.")
        sub.add_argument("monitor_id")

    return parser


def _declared(args: argparse.Namespace, present: bool) -> ScriptResource:
    text = args.file.read_text(encoding="utf-8") if args.file else args.text
    locations = [ScriptLocation(name=args.location)] if args.location else []
    return ScriptResource(
        id=args.monitor_id if present else "",
        monitor_id=args.monitor_id,
        text=text,
        locations=locations,
    )


def dispatch(controller: ScriptController, args: argparse.Namespace) -> ScriptResource:
    monitor_id = args.monitor_id
    if args.command == "create":
        return controller.create(_declared(args, present=False))
    if args.command == "update":
        return controller.update(_declared(args, present=True))
    if args.command == "import":
        return controller.import_resource(monitor_id)

    resource = ScriptResource(id=monitor_id, monitor_id=monitor_id)
    if args.command == "read":
        return controller.read(resource)
    return controller.delete(resource)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        display.failure(str(exc))
        return 1

    display.configure_logging(settings.log_level)
    display.operation_start(args.command, args.monitor_id)

    with SyntheticsClient(settings.api_key, region=settings.region, base_url=settings.base_url) as client:
        controller = ScriptController(
            client,
            settings.secret,
            verify_on_read=settings.verify_on_read,
            bind_location_name=settings.bind_location_name,
        )
        try:
            resource = dispatch(controller, args)
        except (SyntheticsAPIError, TamperDetectedError, ValueError, OSError) as exc:
            display.failure(str(exc))
            return 1

    display.resource_state(resource)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
