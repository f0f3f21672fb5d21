import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from callbridge.core.models import BridgeSettings, FrameworkSettings, RuntimeSettings
from callbridge.runtime.script_runtime import ScriptRuntime
from callbridge.utils.diagnostics import BridgeError, BridgeErrorKind, RuntimeAffinityError


class CallErrorRecord(BaseModel):
    """Represents one recovered bridge error kept for `/errors` output."""

    sequence: int
    func_name: Optional[str] = None
    kind: BridgeErrorKind
    message: str
    severity: str = "error"


class ExecutionContext(BaseModel):
    """
    Explicit handle on the single embedded runtime instance, passed to every
    dispatch and conversion. Bound to the thread that created it.
    """
    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    # Framework Settings (Maps to 'callbridge' section)
    settings: FrameworkSettings = Field(default_factory=FrameworkSettings)

    # Call Behaviour (Maps to 'bridge' section)
    bridge: BridgeSettings = Field(default_factory=BridgeSettings)

    # Runtime Bootstrap (Maps to 'runtime' section)
    runtime_settings: RuntimeSettings = Field(default_factory=RuntimeSettings)

    # The embedded runtime all calls are resolved against
    runtime: Any = Field(default_factory=ScriptRuntime)  # EmbeddedRuntime

    # Recovered call errors, oldest first
    call_errors: List[CallErrorRecord] = Field(default_factory=list)

    _error_sequence: int = PrivateAttr(default=0)
    _owner_thread: int = PrivateAttr(default_factory=threading.get_ident)

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None, **data: Any):
        """
        Initialize the context, optionally with a configuration dictionary.
        """
        if config_dict:
            if 'settings' not in data:
                data['settings'] = FrameworkSettings(**config_dict.get('callbridge', {}))
            if 'bridge' not in data:
                data['bridge'] = BridgeSettings(**config_dict.get('bridge', {}))
            if 'runtime_settings' not in data:
                data['runtime_settings'] = RuntimeSettings(**config_dict.get('runtime', {}))

        super().__init__(**data)

    @classmethod
    def from_config(
        cls,
        config_dict: Optional[Dict[str, Any]] = None,
        root_dir: Union[str, Path] = ".",
    ) -> "ExecutionContext":
        """
        Build a context whose ScriptRuntime is bootstrapped from the 'runtime' section.
        Raises ScriptLoadError when a configured script fails to load.
        """
        context = cls(config_dict=config_dict)
        context.runtime = ScriptRuntime.from_settings(context.runtime_settings, root_dir=root_dir)
        return context

    @property
    def owner_thread(self) -> int:
        return self._owner_thread

    def ensure_owner_thread(self) -> None:
        """Raise RuntimeAffinityError unless called on the thread that owns the runtime."""
        current = threading.get_ident()
        if current != self._owner_thread:
            raise RuntimeAffinityError(
                f"Embedded runtime is owned by thread {self._owner_thread}; "
                f"call attempted from thread {current}."
            )

    def adopt_current_thread(self) -> None:
        """Hand runtime ownership to the calling thread."""
        self._owner_thread = threading.get_ident()

    def record_error(self, error: BridgeError) -> CallErrorRecord:
        self._error_sequence += 1
        record = CallErrorRecord(
            sequence=self._error_sequence,
            func_name=error.func_name,
            kind=error.kind,
            message=error.message,
        )
        self.call_errors.append(record)

        limit = self.bridge.error_history_limit
        if len(self.call_errors) > limit:
            self.call_errors = self.call_errors[-limit:]

        return record

    def recent_errors(self, limit: int = 50, offset: int = 0) -> Tuple[List[CallErrorRecord], int]:
        """Return newest-first, paginated call errors and the total count."""
        safe_limit = max(1, limit)
        safe_offset = max(0, offset)

        ordered = list(reversed(self.call_errors))
        return ordered[safe_offset : safe_offset + safe_limit], len(ordered)

    def clear_errors(self) -> None:
        self.call_errors = []
