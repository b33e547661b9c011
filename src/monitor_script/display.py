# display.py
# All terminal output for the monitor-script CLI.
#
# This module owns presentation and log handler setup. The lifecycle code
# only logs through the standard logging module; run.py calls the named
# functions here to render results.
#
# Colour language:
#   cyan: operation banners
#   green: resource present / success
#   yellow: resource absent
#   red: failures

import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from monitor_script.models import ScriptResource

console = Console()

_LOGGING_CONFIGURED = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _mono(value: str, max_len: int = 120) -> str:
    if len(value) > max_len:
        return value[:max_len] + "…"
    return value


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Route process-wide logging through a rich handler. Idempotent."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _LOGGING_CONFIGURED = True


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def operation_start(action: str, monitor_id: str) -> None:
    console.print()
    console.print(Rule(f"[cyan]{action.upper()}[/cyan] [dim]{escape(monitor_id)}[/dim]", style="cyan"))


def resource_state(resource: ScriptResource) -> None:
    if not resource.present:
        console.print(
            Panel(
                f"[white]No script is tracked for monitor "
                f"'{escape(resource.monitor_id)}'.[/white]",
                title=_label("ABSENT", "yellow"),
                border_style="yellow",
                padding=(0, 2),
            )
        )
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold green", padding=(0, 1))
    table.add_column("Location", style="bold white")
    table.add_column("HMAC (SHA-256)", style="dim white")
    for location in resource.locations:
        table.add_row(escape(location.name), location.hmac)

    body = Text()
    body.append("Monitor: ", style="dim")
    body.append(f"{resource.monitor_id}\n")
    body.append("Script:  ", style="dim")
    body.append(_mono(resource.text))

    console.print(
        Panel(
            body,
            title=_label("PRESENT", "green"),
            border_style="green",
            padding=(0, 2),
        )
    )
    if resource.locations:
        console.print(table)


def failure(reason: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold white]{escape(reason)}[/bold white]",
            title=_label("FAILED", "red"),
            border_style="red",
            padding=(0, 2),
        )
    )
    console.print()
