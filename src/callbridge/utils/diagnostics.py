from enum import Enum
from typing import Optional
from pydantic import BaseModel

class BridgeErrorKind(str, Enum):
    NAME_NOT_FOUND = "NameNotFound"
    NOT_CALLABLE = "NotCallable"
    CALL_FAILED = "CallFailed"
    UNSUPPORTED_SHAPE = "UnsupportedShape"
    CYCLIC_STRUCTURE = "CyclicStructure"
    NUMERIC_OVERFLOW = "NumericOverflow"


class BridgeDiagnostic(BaseModel):
    """
    Standardized error reporting object handed back to the UI layer
    when a bridged call is recovered.
    """
    kind: BridgeErrorKind
    message: str
    func_name: Optional[str] = None
    severity: str = "error" # 'error', 'warning', 'critical'

    def __str__(self) -> str:
        loc = f" in '{self.func_name}'" if self.func_name else ""
        return f"[{self.kind.value}] {self.message}{loc}"


class BridgeError(Exception):
    """
    Base exception for every failure the bridge recovers at its boundary.
    """
    kind: BridgeErrorKind = BridgeErrorKind.CALL_FAILED

    def __init__(self, message: str, func_name: Optional[str] = None):
        self.message = message
        self.func_name = func_name
        ctx = f" in function '{func_name}'" if func_name else ""
        super().__init__(f"Bridge Error{ctx}: {message}")

    def to_diagnostic(self) -> BridgeDiagnostic:
        return BridgeDiagnostic(kind=self.kind, message=self.message, func_name=self.func_name)


class DispatchError(BridgeError):
    """Name resolution or invocation failed inside the embedded runtime."""


class NameNotFoundError(DispatchError):
    kind = BridgeErrorKind.NAME_NOT_FOUND


class NotCallableError(DispatchError):
    kind = BridgeErrorKind.NOT_CALLABLE


class CallFailedError(DispatchError):
    kind = BridgeErrorKind.CALL_FAILED


class ConversionError(BridgeError):
    """A returned native value could not be represented as a dynamic value."""
    kind = BridgeErrorKind.UNSUPPORTED_SHAPE


class UnsupportedShapeError(ConversionError):
    kind = BridgeErrorKind.UNSUPPORTED_SHAPE


class CyclicStructureError(ConversionError):
    kind = BridgeErrorKind.CYCLIC_STRUCTURE


class NumericOverflowError(ConversionError):
    kind = BridgeErrorKind.NUMERIC_OVERFLOW


class RuntimeAffinityError(RuntimeError):
    """
    Raised when a bridge call is made from a thread other than the one
    owning the embedded runtime. This is a caller bug and is not recovered.
    """
