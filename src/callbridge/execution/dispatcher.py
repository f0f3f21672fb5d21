import asyncio
import inspect
import logging
from typing import Any, Optional, Sequence

from callbridge.core.context import ExecutionContext
from callbridge.core.models import BridgeSettings, EmbeddedRuntime, NativeKind, RuntimeBinding
from callbridge.utils.diagnostics import CallFailedError, NameNotFoundError, NotCallableError

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    detail = str(exc)
    return f"{type(exc).__name__}: {detail}" if detail else type(exc).__name__


class BoundFunction:
    """
    A resolved runtime function. Invoking it applies the runtime's call
    semantics and reports any fault raised by the callee as CallFailedError.
    """

    def __init__(self, binding: RuntimeBinding, runtime: EmbeddedRuntime, settings: BridgeSettings):
        self._binding = binding
        self._runtime = runtime
        self._settings = settings

    @property
    def name(self) -> str:
        return self._binding.name

    def invoke(self, args: Optional[Sequence[Any]]) -> Any:
        """
        Call the function. `args=None` means no parameter list at all,
        which is distinct from an empty list for some runtimes.
        """
        try:
            result = self._runtime.invoke_binding(self._binding, args)
        except SystemExit as exc:
            if not self._settings.catch_system_exit:
                raise
            raise CallFailedError(_describe(exc), func_name=self.name) from exc
        except Exception as exc:
            raise CallFailedError(_describe(exc), func_name=self.name) from exc

        if self._settings.await_coroutines and inspect.isawaitable(result):
            return self._run_awaitable(result)
        return result

    def _run_awaitable(self, awaitable: Any) -> Any:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise CallFailedError(
                "Function returned an awaitable while an event loop is running; "
                "bridged calls must complete synchronously.",
                func_name=self.name,
            )

        async def _await_result() -> Any:
            return await awaitable

        try:
            return asyncio.run(_await_result())
        except SystemExit as exc:
            if not self._settings.catch_system_exit:
                raise
            raise CallFailedError(_describe(exc), func_name=self.name) from exc
        except Exception as exc:
            raise CallFailedError(_describe(exc), func_name=self.name) from exc


class CallDispatcher:
    """
    Resolves function names against the runtime's current globals and invokes them.
    Holds no state of its own; every call re-resolves by name exactly once.
    """

    def resolve(self, context: ExecutionContext, name: str) -> BoundFunction:
        binding = context.runtime.lookup(name)
        if binding is None:
            raise NameNotFoundError(f"No binding named '{name}' in the runtime namespace.", func_name=name)

        if binding.kind is not NativeKind.FUNCTION:
            raise NotCallableError(
                f"Binding '{name}' is a {binding.kind.value} value, not a function.",
                func_name=name,
            )

        logger.debug(f"Resolved '{name}' to {type(binding.value).__name__}")
        return BoundFunction(binding, context.runtime, context.bridge)

    def invoke(self, context: ExecutionContext, name: str, args: Sequence[Any]) -> Any:
        function = self.resolve(context, name)
        logger.debug(f"Invoking '{name}' with {len(args)} argument(s)")
        return function.invoke(list(args))

    def invoke_no_args(self, context: ExecutionContext, name: str) -> Any:
        function = self.resolve(context, name)
        logger.debug(f"Invoking '{name}' without a parameter list")
        return function.invoke(None)
