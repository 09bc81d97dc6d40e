"""
Contains some useful utility functions to read the values of a validated context with the expected type.
"""
from typing import TYPE_CHECKING, Any, Optional, TypeVar, overload

from typeguard import TypeCheckError, check_type

if TYPE_CHECKING:
    from paramvalidation.context import ValidationContext

ValueT = TypeVar("ValueT")


def optional_value(context: "ValidationContext", field: str, value_type: type[ValueT]) -> Optional[ValueT]:
    """
    Tries to read the `field` from the `context`. If it is empty or the value doesn't match `value_type`, `None`
    will be returned.
    """
    try:
        return required_value(context, field, value_type)
    except (KeyError, TypeCheckError):
        return None


@overload
def required_value(context: "ValidationContext", field: str, value_type: type[ValueT]) -> ValueT:
    ...


@overload
def required_value(context: "ValidationContext", field: str, value_type: Any) -> Any:
    ...


def required_value(context: "ValidationContext", field: str, value_type: Any) -> Any:
    """
    Reads the `field` from the `context`. If it is empty, a KeyError will be raised.
    If the field has a value, the type will be checked and a TypeCheckError will be raised if the type doesn't match
    the value. Use this after the coercion checks, e.g. `required_value(context, "age", int)`.
    """
    if context.is_empty(field):
        raise KeyError(f"{field}: Not found")
    value = context.get(field)
    try:
        check_type(value, value_type)
    except TypeCheckError as error:
        raise TypeCheckError(f"{field}: {error}") from error
    return value
