"""
Adapters which turn the input structures of web frameworks into the flat maps a `ValidationContext` works on.
"""
from paramvalidation.types import MultiValueInputMap


def first_values(multi_map: MultiValueInputMap) -> dict[str, str]:
    """
    Reduces a map of value sequences (e.g. query parameters which may appear multiple times) to a map holding only
    the first value of every field. Fields without any value are dropped.
    """
    return {field: values[0] for field, values in multi_map.items() if values}
