from __future__ import annotations

from callbridge.core.context import ExecutionContext
from callbridge.core.models import EmbeddedRuntime, NativeKind, RuntimeBinding
from callbridge.core.values import (
	BoolValue,
	DynamicValue,
	FloatValue,
	IntValue,
	ListValue,
	NullValue,
	StringValue,
	dynamic_from_plain,
)
from callbridge.execution.bridge import CallOutcome, RuntimeBridge
from callbridge.execution.dispatcher import BoundFunction, CallDispatcher
from callbridge.execution.value_bridge import ValueBridge
from callbridge.runtime.script_runtime import ScriptRuntime
from callbridge.utils.diagnostics import BridgeDiagnostic, BridgeError, BridgeErrorKind

__all__ = [
	"BoolValue",
	"BoundFunction",
	"BridgeDiagnostic",
	"BridgeError",
	"BridgeErrorKind",
	"CallDispatcher",
	"CallOutcome",
	"DynamicValue",
	"EmbeddedRuntime",
	"ExecutionContext",
	"FloatValue",
	"IntValue",
	"ListValue",
	"NativeKind",
	"NullValue",
	"RuntimeBinding",
	"RuntimeBridge",
	"ScriptRuntime",
	"StringValue",
	"ValueBridge",
	"dynamic_from_plain",
]
