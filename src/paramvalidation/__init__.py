"""
This package enables you to validate flat maps of loosely typed values (e.g. the parameters of an HTTP request) with
a fluent API. The values get coerced into typed values while one error message per field is collected.
"""

from .analysis import ValidationResult
from .context import ValidationContext
from .errors import GLOBAL_ERROR_KEY, ParamValidationError, ValidationStateError
from .execution import ValidationManager
from .messages import DEFAULT_MESSAGES, MessageCatalog
from .types import FieldValue, ValidationRoutine
from .utils import first_values, optional_value, required_value
