"""
UI-facing bridge object.

An instance of RuntimeBridge is what the UI layer registers in its scripting
context. Every call returns synchronously, and every bridge error is recovered
here: the UI gets either a value or a tagged diagnostic, never an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

from pydantic import BaseModel, Field

from callbridge.core.context import ExecutionContext
from callbridge.core.values import BaseDynamicValue, DynamicValue, NullValue
from callbridge.execution.dispatcher import CallDispatcher
from callbridge.execution.execute_helper import call_function_by_name
from callbridge.utils.diagnostics import BridgeDiagnostic, BridgeError

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[BridgeDiagnostic], None]


class CallOutcome(BaseModel):
    """Result of a bridged call: a value, or a diagnostic tagged with its error kind."""

    value: DynamicValue = Field(default_factory=NullValue)
    error: Optional[BridgeDiagnostic] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RuntimeBridge:
    """
    Lets a UI scripting layer call named functions in the embedded runtime.

    Example:
        bridge = RuntimeBridge(context)
        bridge.call("add", [2, 3])   # IntValue(5)
        bridge.call("identity")      # zero-argument form
    """

    def __init__(self, context: ExecutionContext, dispatcher: Optional[CallDispatcher] = None):
        self.context = context
        self.dispatcher = dispatcher or CallDispatcher()
        self._error_handlers: List[ErrorHandler] = []
        self.last_error: Optional[BridgeDiagnostic] = None

    def try_call(self, function_name: str, args: Optional[Sequence[Any]] = None) -> CallOutcome:
        """
        Call a function and report the outcome.

        Args:
            function_name: Name of the function in the runtime globals
            args: Dynamic (or plain) argument values; None for the zero-argument form

        Returns:
            CallOutcome holding the converted result or the diagnostic
        """
        try:
            value = call_function_by_name(
                context=self.context,
                function_name=function_name,
                args=args,
                dispatcher=self.dispatcher,
            )
        except BridgeError as exc:
            return CallOutcome(error=self._recover(exc))

        self.last_error = None
        return CallOutcome(value=value)

    def call(self, function_name: str, args: Optional[Sequence[Any]] = None) -> BaseDynamicValue:
        """
        Call a function and return its result. On failure returns NullValue();
        the diagnostic is available from `last_error` and the error handlers.
        """
        return self.try_call(function_name, args).value

    def on_error(self, handler: ErrorHandler) -> Callable[[], None]:
        """
        Register a handler for recovered call errors.

        Returns:
            A function to unregister the handler
        """
        self._error_handlers.append(handler)

        def unregister() -> None:
            if handler in self._error_handlers:
                self._error_handlers.remove(handler)

        return unregister

    def _recover(self, exc: BridgeError) -> BridgeDiagnostic:
        self.context.record_error(exc)
        diagnostic = exc.to_diagnostic()
        self.last_error = diagnostic
        logger.info(f"Recovered call error: {diagnostic}")

        for handler in list(self._error_handlers):
            try:
                handler(diagnostic)
            except Exception as e:
                logger.error(f"Error handler failed: {e}")

        return diagnostic
