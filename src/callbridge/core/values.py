from typing import Annotated, Any, List, Literal, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, TypeAdapter, field_validator

# The UI variant type stores integers as signed 64-bit values.
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

_MISSING: Any = object()


class BaseDynamicValue(BaseModel):
    """
    Base class for the UI-side dynamic values passed into and returned from bridged calls.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    def __init__(self, value: Any = _MISSING, /, **data: Any):
        # Allow IntValue(5) as well as IntValue(value=5)
        if value is not _MISSING:
            data["value"] = value
        super().__init__(**data)

    def to_plain(self) -> Any:
        """Flatten into the equivalent plain Python value."""
        raise NotImplementedError


class NullValue(BaseDynamicValue):
    kind: Literal["null"] = "null"

    def to_plain(self) -> None:
        return None


class BoolValue(BaseDynamicValue):
    kind: Literal["bool"] = "bool"
    value: StrictBool

    def to_plain(self) -> bool:
        return self.value


class IntValue(BaseDynamicValue):
    kind: Literal["int"] = "int"
    value: Annotated[StrictInt, Field(ge=INT_MIN, le=INT_MAX)]

    def to_plain(self) -> int:
        return self.value


class FloatValue(BaseDynamicValue):
    kind: Literal["float"] = "float"
    value: float

    @field_validator("value", mode="before")
    @classmethod
    def reject_non_numbers(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("FloatValue requires an int or float")
        return float(value)

    def to_plain(self) -> float:
        return self.value


class StringValue(BaseDynamicValue):
    kind: Literal["string"] = "string"
    value: StrictStr

    def to_plain(self) -> str:
        return self.value


class ListValue(BaseDynamicValue):
    """An ordered list of dynamic values. Nesting is allowed."""
    kind: Literal["list"] = "list"
    value: Tuple["DynamicValue", ...] = ()

    def to_plain(self) -> List[Any]:
        return [item.to_plain() for item in self.value]

    def __len__(self) -> int:
        return len(self.value)

    def __getitem__(self, index: int) -> "DynamicValue":
        return self.value[index]


DynamicValue = Annotated[
    Union[NullValue, BoolValue, IntValue, FloatValue, StringValue, ListValue],
    Field(discriminator="kind"),
]

ListValue.model_rebuild()

DYNAMIC_VALUE_ADAPTER: TypeAdapter = TypeAdapter(DynamicValue)


def dynamic_from_plain(data: Any) -> BaseDynamicValue:
    """
    Build a dynamic value from a plain Python value at the UI boundary.

    Raises TypeError for values with no dynamic equivalent and ValueError
    for integers outside the 64-bit range.
    """
    if isinstance(data, BaseDynamicValue):
        return data
    if data is None:
        return NullValue()
    if isinstance(data, bool):
        return BoolValue(data)
    if isinstance(data, int):
        return IntValue(data)
    if isinstance(data, float):
        return FloatValue(data)
    if isinstance(data, str):
        return StringValue(data)
    if isinstance(data, (list, tuple)):
        return ListValue(tuple(dynamic_from_plain(item) for item in data))
    raise TypeError(f"No dynamic value representation for {type(data).__name__!s}")


def dynamic_to_json(value: BaseDynamicValue, indent: int | None = None) -> str:
    """Serialize to the tagged JSON form, e.g. {"kind": "int", "value": 5}."""
    return DYNAMIC_VALUE_ADAPTER.dump_json(value, indent=indent).decode("utf-8")


def dynamic_from_json(payload: str | bytes) -> BaseDynamicValue:
    """Parse the tagged JSON form produced by `dynamic_to_json`."""
    return DYNAMIC_VALUE_ADAPTER.validate_json(payload)
