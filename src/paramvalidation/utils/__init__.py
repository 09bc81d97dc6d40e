"""
Contains some useful utility functions around the validation context.
"""
from .adapters import first_values
from .query_object import optional_value, required_value
