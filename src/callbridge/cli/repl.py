import sys
import typer
from pathlib import Path
from typing import List, Optional
from prompt_toolkit import PromptSession

from callbridge.config.loader import load_context
from callbridge.core.context import ExecutionContext
from callbridge.cli.formatter import OutputFormatter, configure_logging
from callbridge.execution.arguments import ArgumentResolver
from callbridge.execution.bridge import RuntimeBridge
from callbridge.runtime.script_runtime import ScriptLoadError


class CallBridgeREPL:
    def __init__(self, root_dir: Path, scripts: Optional[List[Path]] = None):
        self.root_dir = root_dir
        self.scripts = list(scripts or [])
        self.context: Optional[ExecutionContext] = None
        self.bridge: Optional[RuntimeBridge] = None
        self.prompt_session: Optional[PromptSession] = None

    def load(self) -> bool:
        """
        Builds a fresh runtime from config and scripts. Returns False when loading fails.
        """
        try:
            context = load_context(self.root_dir, self.scripts)
        except ScriptLoadError as e:
            OutputFormatter.log(str(e), severity="error")
            return False

        configure_logging(context.settings.log_level)
        self.context = context
        self.bridge = RuntimeBridge(context)

        names = context.runtime.function_names()
        OutputFormatter.log(f"Loaded {len(names)} functions: {', '.join(names)}", severity="success")
        return True

    def start(self):
        OutputFormatter.log("callbridge REPL. Type '/help' for admin commands or '/quit' to exit.", severity="info")
        if not self.load():
            raise typer.Exit(code=1)

        if sys.stdin.isatty():
            self.prompt_session = PromptSession()

        while True:
            try:
                if self.prompt_session is not None:
                    command_line = self.prompt_session.prompt("callbridge > ")
                else:
                    command_line = typer.prompt("callbridge >", prompt_suffix=" ", default="", show_default=False)

                if not command_line:
                    continue

                command_line = command_line.strip()

                # Admin Commands
                if command_line.startswith('/'):
                    should_continue = self.handle_admin_command(command_line)
                    if not should_continue:
                        break
                    continue

                if command_line in ("exit", "quit"):
                    OutputFormatter.log("Exiting callbridge REPL.", severity="info")
                    break

                self.handle_command(command_line)

            except (KeyboardInterrupt, EOFError, typer.Abort):
                OutputFormatter.log("\nExiting...", severity="info")
                break

    def handle_admin_command(self, line: str) -> bool:
        """
        Processes commands starting with '/'.
        Returns False to signal REPL exit, True to continue.
        """
        parts = line[1:].split()
        if not parts:
            return True

        cmd = parts[0].lower()
        args = parts[1:]

        handlers = {
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
            "help": self._cmd_help,
            "functions": self._cmd_functions,
            "errors": self._cmd_errors,
            "reload": self._cmd_reload,
        }

        handler = handlers.get(cmd)
        if handler:
            return handler(args)
        else:
            OutputFormatter.log(f"Unknown admin command: /{cmd}. Type /help for options.", severity="error")
            return True

    def _cmd_quit(self, args) -> bool:
        OutputFormatter.log("Exiting callbridge REPL.", severity="info")
        return False

    def _cmd_help(self, args) -> bool:
        commands = [
            ("/functions", "Lists functions bound in the runtime."),
            ("/errors", "Shows recent call errors. Usage: /errors [limit] [offset]"),
            ("/reload", "Rebuilds the runtime from config and scripts."),
            ("/help", "Lists available admin commands."),
            ("/quit", "Exits the REPL."),
        ]
        OutputFormatter.log("\nAvailable Admin Commands:", severity="info")
        for cmd, desc in commands:
            typer.echo(f"  {cmd:<12} {desc}")
        typer.echo("  NAME [ARGS]  Calls NAME. ARGS: space separated values, a [list], or @file.")
        typer.echo("")
        return True

    def _cmd_functions(self, args) -> bool:
        names = self.context.runtime.function_names()
        if not names:
            OutputFormatter.log("No functions bound in the runtime.", severity="info")
            return True

        OutputFormatter.log(f"Runtime Functions ({len(names)}):", severity="info")
        for name in names:
            typer.echo(f"  {name}")
        return True

    def _cmd_errors(self, args) -> bool:
        try:
            limit = int(args[0]) if len(args) > 0 else 50
            offset = int(args[1]) if len(args) > 1 else 0
        except ValueError:
            OutputFormatter.log("Usage: /errors [limit] [offset]", severity="error")
            return True

        records, total = self.context.recent_errors(limit=limit, offset=offset)
        OutputFormatter.print_call_errors(records, total=total, limit=limit, offset=offset)
        return True

    def _cmd_reload(self, args) -> bool:
        OutputFormatter.log("Reloading...", severity="info")
        if self.load():
            OutputFormatter.log("Reload complete.", severity="success")
        else:
            OutputFormatter.log("Reload failed; keeping the previous runtime.", severity="warning")
        return True

    def handle_command(self, line: str):
        # Format: NAME [ARGS...]
        parts = line.split(" ", 1)
        func_name = parts[0]
        arg_str = parts[1] if len(parts) > 1 else None

        try:
            args = ArgumentResolver.parse_command_tail(arg_str)
        except ValueError as e:
            OutputFormatter.log(f"Error Resolving Arguments: {e}", severity="error")
            return

        outcome = self.bridge.try_call(func_name, args)
        if not outcome.ok:
            OutputFormatter.print_diagnostic(outcome.error)
            return

        OutputFormatter.print_data(outcome.value)
