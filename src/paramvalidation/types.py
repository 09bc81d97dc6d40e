"""
Contains the types used in the validation framework
"""
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence, TypeAlias

if TYPE_CHECKING:
    from .context import ValidationContext

FieldValue: TypeAlias = str | int | Decimal | date | datetime | time | bool | None
"""
The values a field can hold. Raw input is usually a string; the coercion checks replace it by the parsed
integer, decimal, date or time.
"""
InputMap: TypeAlias = Mapping[str, FieldValue]
MultiValueInputMap: TypeAlias = Mapping[str, Optional[Sequence[str]]]


class ValidationRoutine(Protocol):
    """
    A protocol that defines a validation routine, i.e. anything callable which applies its checks to a
    `ValidationContext`. Plain functions satisfy this protocol.
    """

    def __call__(self, context: "ValidationContext") -> None:
        ...
