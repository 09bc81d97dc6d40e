"""
Contains the exceptions raised by the validation framework. Field errors are never raised on their own, they are
collected in the error map of the `ValidationContext`. These exceptions only carry the context to the caller.
"""
from typing import TYPE_CHECKING

from frozendict import frozendict

if TYPE_CHECKING:
    from .context import ValidationContext

GLOBAL_ERROR_KEY = "global"


class ParamValidationError(Exception):
    """
    Raised by `ValidationContext.check` if the context contains errors and by `ValidationContext.validate` if a
    validation routine failed unexpectedly. It carries the originating context, so you can retrieve both the
    (partially coerced) values and the complete error map from a single caught exception.
    """

    def __init__(self, context: "ValidationContext"):
        super().__init__(context)
        self.context = context

    @property
    def errors(self) -> frozendict[str, str]:
        """Shortcut for the error map of the originating context"""
        return self.context.errors

    def __str__(self):
        return "; ".join(f"{field}: {message}" for field, message in sorted(self.context.errors.items()))


class ValidationStateError(ParamValidationError):
    """
    Raised if the overall state of a context is queried although no check has been executed yet. This is a
    programming error of the caller and not a problem of the validated input. The carried context is a fresh one
    with the message stored under the global key.
    """

    def __init__(self, message: str):
        # pylint: disable=import-outside-toplevel
        from .context import ValidationContext

        context = ValidationContext()
        context.set_error(GLOBAL_ERROR_KEY, message)
        super().__init__(context)
