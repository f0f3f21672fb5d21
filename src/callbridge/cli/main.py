import typer
from pathlib import Path
from typing import List, Optional

from callbridge.config.loader import load_context
from callbridge.core.context import ExecutionContext
from callbridge.cli.formatter import OutputFormatter, configure_logging
from callbridge.cli.repl import CallBridgeREPL
from callbridge.execution.arguments import ArgumentResolver
from callbridge.execution.bridge import RuntimeBridge
from callbridge.runtime.script_runtime import ScriptLoadError

app = typer.Typer(name="callbridge", help="callbridge CLI Interface", rich_markup_mode=None)

ROOT_OPTION_HELP = "Directory holding callbridge.yaml; configured scripts resolve against it."
SCRIPT_OPTION_HELP = "Extra script to load into the runtime. May be repeated."


def _load_or_exit(root_dir: Path, scripts: Optional[List[Path]]) -> ExecutionContext:
    if not root_dir.exists():
        OutputFormatter.log(f"Warning: Root directory '{root_dir}' does not exist.", severity="warning")

    try:
        context = load_context(root_dir, scripts or [])
    except ScriptLoadError as e:
        OutputFormatter.log(str(e), severity="error")
        raise typer.Exit(code=1)

    configure_logging(context.settings.log_level)
    return context


def _read_args_payload(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None

    # If the string is likely a path and exists, read the list from it
    p = Path(raw)
    if len(raw) < 256 and p.exists() and p.is_file():
        return p.read_text()
    return raw


@app.command()
def call(
    function_name: str = typer.Argument(..., help="Name of the runtime function."),
    args: Optional[str] = typer.Argument(
        None,
        help="YAML/JSON argument list (or a file holding one). Omit for the zero-argument form.",
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_OPTION_HELP),
    script: Optional[List[Path]] = typer.Option(None, "--script", "-s", help=SCRIPT_OPTION_HELP),
    tagged: bool = typer.Option(False, "--json", help="Print the kind-tagged JSON form of the result."),
):
    """
    Call a runtime function by name.
    """
    context = _load_or_exit(root, script)

    try:
        call_args = ArgumentResolver.parse_list(_read_args_payload(args))
    except ValueError as e:
        OutputFormatter.log(f"Error Resolving Arguments: {e}", severity="error")
        raise typer.Exit(code=1)

    bridge = RuntimeBridge(context)
    outcome = bridge.try_call(function_name, call_args)

    if not outcome.ok:
        OutputFormatter.print_diagnostic(outcome.error)
        raise typer.Exit(code=1)

    OutputFormatter.print_data(outcome.value, tagged=tagged)


@app.command()
def functions(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_OPTION_HELP),
    script: Optional[List[Path]] = typer.Option(None, "--script", "-s", help=SCRIPT_OPTION_HELP),
):
    """
    List the functions bound in the runtime.
    """
    context = _load_or_exit(root, script)
    names = context.runtime.function_names()
    if not names:
        OutputFormatter.log("No functions bound in the runtime.", severity="info")
        return
    OutputFormatter.print_functions(names)


@app.command()
def repl(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_OPTION_HELP),
    script: Optional[List[Path]] = typer.Option(None, "--script", "-s", help=SCRIPT_OPTION_HELP),
):
    """
    Start an interactive REPL session.
    """
    CallBridgeREPL(root_dir=root, scripts=script).start()


if __name__ == "__main__":
    app()
