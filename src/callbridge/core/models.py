from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NativeKind(str, Enum):
    """Shape of a value living inside the embedded runtime."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    FUNCTION = "function"
    OBJECT = "object"


class RuntimeBinding(BaseModel):
    """
    The runtime's association between a name and the value bound to it.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    value: Any
    kind: NativeKind


@runtime_checkable
class EmbeddedRuntime(Protocol):
    """
    Surface the bridge consumes from the embedded language runtime.
    """

    def lookup(self, name: str) -> Optional[RuntimeBinding]:
        ...

    def invoke_binding(self, binding: RuntimeBinding, args: Optional[Sequence[Any]]) -> Any:
        ...

    def classify(self, value: Any) -> NativeKind:
        ...


class FrameworkSettings(BaseSettings):
    """
    Framework-level settings (the 'callbridge' section in callbridge.yaml).
    """
    model_config = SettingsConfigDict(env_prefix='CALLBRIDGE_', extra='ignore')

    env: str = "development"
    app_name: str = "callbridge"
    log_level: str = "WARNING"


class BridgeSettings(BaseModel):
    """
    Call behaviour settings (the 'bridge' section in callbridge.yaml).
    """
    model_config = ConfigDict(extra='ignore')

    await_coroutines: bool = True
    catch_system_exit: bool = True
    error_history_limit: int = Field(default=200, ge=1)


class RuntimeSettings(BaseModel):
    """
    Embedded runtime bootstrap (the 'runtime' section in callbridge.yaml).
    """
    model_config = ConfigDict(extra='ignore')

    scripts: List[str] = Field(default_factory=list)
    globals: Dict[str, Any] = Field(default_factory=dict)
