import math
import operator
from typing import Any, List, Set

from callbridge.core.models import EmbeddedRuntime, NativeKind
from callbridge.core.values import (
    INT_MAX,
    INT_MIN,
    BaseDynamicValue,
    BoolValue,
    FloatValue,
    IntValue,
    ListValue,
    NullValue,
    StringValue,
)
from callbridge.utils.diagnostics import CyclicStructureError, NumericOverflowError, UnsupportedShapeError


class ValueBridge:
    """
    Converts between UI-side dynamic values and the embedded runtime's native values.

    `to_native` is total over well-formed dynamic values. `to_dynamic` validates
    whatever the invoked function returned and raises a ConversionError when the
    value has no dynamic equivalent. Nothing is cached between calls.
    """

    @classmethod
    def to_native(cls, value: BaseDynamicValue) -> Any:
        try:
            return cls._to_native(value)
        except RecursionError as e:
            raise UnsupportedShapeError(
                "List argument is nested deeper than the runtime can convert."
            ) from e

    @classmethod
    def _to_native(cls, value: BaseDynamicValue) -> Any:
        if isinstance(value, NullValue):
            return None
        if isinstance(value, (BoolValue, IntValue, FloatValue, StringValue)):
            return value.value
        if isinstance(value, ListValue):
            return [cls._to_native(item) for item in value.value]

        # Unreachable for values built from the DynamicValue variants
        raise TypeError(f"Not a dynamic value: {type(value).__name__}")

    @classmethod
    def to_native_args(cls, values: List[BaseDynamicValue]) -> List[Any]:
        return [cls.to_native(value) for value in values]

    @classmethod
    def to_dynamic(cls, value: Any, runtime: EmbeddedRuntime, func_name: str | None = None) -> BaseDynamicValue:
        try:
            return cls._convert(value, runtime, set(), func_name)
        except RecursionError as e:
            raise UnsupportedShapeError(
                "Returned list is nested deeper than the bridge can convert.",
                func_name=func_name,
            ) from e

    @classmethod
    def _convert(cls, value: Any, runtime: EmbeddedRuntime, path: Set[int], func_name: str | None) -> BaseDynamicValue:
        kind = runtime.classify(value)

        if kind is NativeKind.NULL:
            return NullValue()

        if kind is NativeKind.BOOL:
            return BoolValue(bool(value))

        if kind is NativeKind.INT:
            number = int(operator.index(value))
            if number < INT_MIN or number > INT_MAX:
                raise NumericOverflowError(
                    f"Integer {number} is outside the 64-bit range [{INT_MIN}, {INT_MAX}].",
                    func_name=func_name,
                )
            return IntValue(number)

        if kind is NativeKind.FLOAT:
            return FloatValue(cls._to_float(value, func_name))

        if kind is NativeKind.STRING:
            return StringValue(str(value))

        if kind is NativeKind.LIST:
            marker = id(value)
            if marker in path:
                raise CyclicStructureError(
                    f"{type(value).__name__} contains a reference to itself.",
                    func_name=func_name,
                )
            path.add(marker)
            try:
                items = tuple(cls._convert(item, runtime, path, func_name) for item in value)
            finally:
                path.discard(marker)
            return ListValue(items)

        raise UnsupportedShapeError(
            f"Value of type '{type(value).__name__}' ({kind.value}) has no dynamic value representation.",
            func_name=func_name,
        )

    @classmethod
    def _to_float(cls, value: Any, func_name: str | None) -> float:
        if isinstance(value, float):
            return value

        try:
            number = float(value)
        except OverflowError as e:
            raise NumericOverflowError(
                f"{type(value).__name__} value is outside the float range.",
                func_name=func_name,
            ) from e
        except ValueError as e:
            # Decimal('sNaN') refuses float conversion
            raise UnsupportedShapeError(
                f"{type(value).__name__} value {value} has no float representation: {e}",
                func_name=func_name,
            ) from e

        # Decimal('1e400') becomes inf instead of raising
        if math.isinf(number) and not cls._is_infinite(value):
            raise NumericOverflowError(
                f"{type(value).__name__} value {value} is outside the float range.",
                func_name=func_name,
            )
        return number

    @staticmethod
    def _is_infinite(value: Any) -> bool:
        is_infinite = getattr(value, "is_infinite", None)
        if callable(is_infinite):
            return bool(is_infinite())
        return False
