import builtins
import decimal
import inspect
import numbers
import sys
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from callbridge.core.models import NativeKind, RuntimeBinding, RuntimeSettings


class ScriptLoadError(Exception):
    """Raised when a script cannot be read or fails while executing into the runtime."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        self.message = message
        self.file_path = file_path
        loc = f" ({file_path})" if file_path else ""
        super().__init__(f"Script Load Error{loc}: {message}")


class ScriptRuntime:
    """
    An embedded Python runtime: scripts are executed into a private globals
    namespace, and functions are resolved by name from that namespace at call time.
    """

    MAIN_MODULE = "__callbridge_main__"

    def __init__(self, initial_globals: Optional[Dict[str, Any]] = None):
        self._namespace: Dict[str, Any] = {
            "__name__": self.MAIN_MODULE,
            "__builtins__": builtins,
        }
        self.loaded_scripts: List[str] = []
        if initial_globals:
            self._namespace.update(initial_globals)

    @classmethod
    def from_settings(cls, settings: RuntimeSettings, root_dir: Union[str, Path] = ".") -> "ScriptRuntime":
        """
        Build a runtime seeded with configured globals, then load configured scripts
        relative to root_dir.
        """
        runtime = cls(initial_globals=settings.globals)
        root = Path(root_dir)
        for script in settings.scripts:
            script_path = Path(script)
            if not script_path.is_absolute():
                script_path = root / script_path
            runtime.load_file(script_path)
        return runtime

    # Host setup

    def load_source(self, source: str, filename: str = "<script>") -> None:
        """Compile and execute source into the runtime namespace."""
        try:
            code = compile(source, filename, "exec")
        except SyntaxError as e:
            raise ScriptLoadError(f"Syntax error: {e.msg} (line {e.lineno})", file_path=filename) from e

        try:
            exec(code, self._namespace)
        except Exception as e:
            raise ScriptLoadError(f"{type(e).__name__}: {e}", file_path=filename) from e

        self.loaded_scripts.append(filename)

    def load_file(self, path: Union[str, Path]) -> None:
        """
        Execute a script file into the runtime. The script's directory is on
        sys.path while it runs so it can import sibling modules.
        """
        path = Path(path).expanduser()
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ScriptLoadError(f"Could not read script: {e}", file_path=str(path)) from e

        self._namespace["__file__"] = str(path.resolve())
        try:
            with self._temporary_sys_path([str(path.resolve().parent)]):
                self.load_source(source, filename=str(path))
        finally:
            self._namespace.pop("__file__", None)

    def define(self, name: str, value: Any) -> None:
        """Bind a value directly into the runtime globals."""
        self._namespace[name] = value

    def undefine(self, name: str) -> None:
        self._namespace.pop(name, None)

    def function_names(self) -> List[str]:
        """Public names in the runtime globals that are bound to functions."""
        names = []
        for name, value in self._namespace.items():
            if name.startswith("_") or inspect.isclass(value):
                continue
            if self.classify(value) is NativeKind.FUNCTION:
                names.append(name)
        return sorted(names)

    def __contains__(self, name: str) -> bool:
        return name in self._namespace

    # Bridge-facing surface

    def lookup(self, name: str) -> Optional[RuntimeBinding]:
        """
        Resolve a name against the current globals, falling back to builtins
        for the first segment. Dotted names continue by attribute access.
        """
        if not isinstance(name, str) or not name:
            return None

        head, *rest = name.split(".")
        if head in self._namespace:
            value = self._namespace[head]
        elif not head.startswith("_") and hasattr(builtins, head):
            value = getattr(builtins, head)
        else:
            return None

        for part in rest:
            if not part:
                return None
            # Properties and __getattr__ hooks run script code and may raise anything
            try:
                value = getattr(value, part)
            except Exception:
                return None

        return RuntimeBinding(name=name, value=value, kind=self.classify(value))

    def invoke_binding(self, binding: RuntimeBinding, args: Optional[Sequence[Any]]) -> Any:
        if args is None:
            return binding.value()
        return binding.value(*args)

    def classify(self, value: Any) -> NativeKind:
        if value is None:
            return NativeKind.NULL
        if isinstance(value, bool):
            return NativeKind.BOOL
        if isinstance(value, numbers.Integral):
            return NativeKind.INT
        if isinstance(value, (numbers.Real, decimal.Decimal)):
            return NativeKind.FLOAT
        if isinstance(value, str):
            return NativeKind.STRING
        if isinstance(value, (list, tuple)):
            return NativeKind.LIST
        if isinstance(value, ModuleType):
            return NativeKind.OBJECT
        if callable(value):
            return NativeKind.FUNCTION
        return NativeKind.OBJECT

    @contextmanager
    def _temporary_sys_path(self, roots: Iterable[str]):
        """Temporarily prepend import roots to sys.path."""
        inserted: list[str] = []
        for root in reversed(list(roots)):
            if root not in sys.path:
                sys.path.insert(0, root)
                inserted.append(root)

        try:
            yield
        finally:
            for root in inserted:
                try:
                    sys.path.remove(root)
                except ValueError:
                    continue
