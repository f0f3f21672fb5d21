from typing import Any, Optional, Sequence

from callbridge.core.context import ExecutionContext
from callbridge.core.values import BaseDynamicValue, dynamic_from_plain
from callbridge.execution.dispatcher import CallDispatcher
from callbridge.execution.value_bridge import ValueBridge


def call_function_by_name(
    context: ExecutionContext,
    function_name: str,
    args: Optional[Sequence[Any]] = None,
    dispatcher: Optional[CallDispatcher] = None,
) -> BaseDynamicValue:
    """Call a runtime function by name and return its result as a dynamic value.

    This helper is the standard pipeline used by the bridge facade, CLI and REPL:
    argument conversion, resolution and invocation, result conversion.
    `args=None` selects the zero-argument form. Raises BridgeError subclasses.
    """
    context.ensure_owner_thread()
    dispatcher = dispatcher or CallDispatcher()

    if args is None:
        raw_result = dispatcher.invoke_no_args(context, function_name)
    else:
        dynamic_args = [dynamic_from_plain(arg) for arg in args]
        native_args = ValueBridge.to_native_args(dynamic_args)
        try:
            raw_result = dispatcher.invoke(context, function_name, native_args)
        finally:
            native_args.clear()

    return ValueBridge.to_dynamic(raw_result, context.runtime, func_name=function_name)
