import json
import logging
import typer
from typing import Any, List
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from callbridge.core.context import CallErrorRecord
from callbridge.core.values import BaseDynamicValue, dynamic_to_json
from callbridge.utils.diagnostics import BridgeDiagnostic

# Create a stderr console for logging
error_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route callbridge library logging to the stderr console."""
    logger = logging.getLogger("callbridge")
    try:
        logger.setLevel(level.upper())
    except ValueError:
        logger.setLevel(logging.WARNING)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=error_console, show_path=False))


class OutputFormatter:
    """
    Handles output formatting for CLI and REPL.
    Ensures separation of concerns between System Logs (stderr) and Data (stdout).
    """

    @staticmethod
    def log(message: str, severity: str = "info") -> None:
        """
        Print system messages to stderr with color coding.
        """
        style = "white"
        prefix = "[SYSTEM]"

        if severity == "warning":
            style = "yellow"
        elif severity == "error":
            style = "red"
        elif severity == "critical":
            style = "bold red"
        elif severity == "success":
            style = "green"

        error_console.print(f"[{style}]{prefix} {escape(message)}[/{style}]", highlight=False)

    @staticmethod
    def print_diagnostic(diagnostic: BridgeDiagnostic) -> None:
        """Print a recovered call error with its kind."""
        target = f" in '{diagnostic.func_name}'" if diagnostic.func_name else ""
        OutputFormatter.log(
            f"{diagnostic.kind.value}{target}: {diagnostic.message}",
            severity=diagnostic.severity,
        )

    @staticmethod
    def print_call_errors(records: List[CallErrorRecord], total: int, limit: int, offset: int) -> None:
        """Print recorded call errors for REPL `/errors` output."""
        if not records:
            OutputFormatter.log("No call errors recorded.", severity="info")
            return

        table = Table(title="Call Errors", border_style="red", header_style="bold red")
        table.add_column("#", justify="right")
        table.add_column("Kind")
        table.add_column("Function")
        table.add_column("Message")

        for record in records:
            table.add_row(
                str(record.sequence),
                record.kind.value,
                record.func_name or "",
                record.message,
            )

        error_console.print(table)
        error_console.print(f"Showing {len(records)} of {total} call errors (offset={offset}, limit={limit}).")
        error_console.print()

    @staticmethod
    def print_functions(names: List[str]) -> None:
        table = Table(title="Runtime Functions")
        table.add_column("Name", style="cyan")
        for name in names:
            table.add_row(name)
        error_console.print(table)

    @staticmethod
    def print_data(data: Any, tagged: bool = False) -> None:
        """
        Print a call result to stdout.
        Strings are printed raw; everything else as JSON. With `tagged`, the
        dynamic value's kind-tagged form is printed instead.
        """
        if isinstance(data, BaseDynamicValue):
            if tagged:
                typer.echo(dynamic_to_json(data, indent=2))
                return
            data = data.to_plain()

        if isinstance(data, str):
            typer.echo(data)
            return

        try:
            typer.echo(json.dumps(data, indent=2))
        except (TypeError, ValueError) as e:
            OutputFormatter.log(f"JSON Serialization failed: {e}", severity="error")
            typer.echo(str(data))
