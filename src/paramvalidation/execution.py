"""
Contains the ValidationManager which applies a set of validation routines to many input maps.
"""
import logging
from typing import Optional

from .analysis import ValidationResult
from .context import ValidationContext
from .errors import ParamValidationError
from .messages import DEFAULT_MESSAGES, MessageCatalog
from .types import InputMap, ValidationRoutine

_logger = logging.getLogger(__name__)


class ValidationManager:
    """
    Collects validation routines and applies all of them to every input map passed to `validate`. Each input map
    gets its own `ValidationContext`. E.g.:
    ```
    def validate_person(context: ValidationContext):
        context.select("name").required().letters_spaces()
        context.select("age").required().coerce_integer().min(18)

    manager = ValidationManager()
    manager.register(validate_person)
    result = manager.validate({"name": "Ana", "age": "17"}, {"name": "Bob", "age": "42"})
    assert result.num_fails == 1
    ```
    """

    def __init__(self, messages: MessageCatalog = DEFAULT_MESSAGES, diagnostics: Optional[logging.Logger] = None):
        self.messages = messages
        self.diagnostics = diagnostics if diagnostics is not None else _logger
        self._routines: list[ValidationRoutine] = []

    @property
    def routines(self) -> tuple[ValidationRoutine, ...]:
        """The registered routines in the order they get executed"""
        return tuple(self._routines)

    def register(self, routine: ValidationRoutine) -> "ValidationManager":
        """
        Registers a validation routine. A routine is any callable taking a `ValidationContext`.
        """
        if not callable(routine):
            raise TypeError(f"{routine!r} is not callable")
        self._routines.append(routine)
        return self

    def _validate_input_map(self, input_map: InputMap) -> ValidationContext:
        context = ValidationContext(input_map, messages=self.messages, diagnostics=self.diagnostics)
        try:
            context.validate(*self._routines)
        except ParamValidationError as error:
            # the context carries everything, the error only stopped the routines early
            self.diagnostics.debug("Validation stopped early: %s", error)
        return context

    def validate(self, *input_maps: InputMap) -> ValidationResult:
        """
        Validates the input maps with all registered routines and returns a ValidationResult.
        If a routine stops early (via `check`) or fails unexpectedly, only the validation of the affected input map
        stops. The error is recorded in its context.
        """
        contexts = [self._validate_input_map(input_map) for input_map in input_maps]
        result = ValidationResult(contexts)
        self.diagnostics.debug(
            "Validated %i input map(s) with %i routine(s): %i failed",
            result.total,
            len(self._routines),
            result.num_fails,
        )
        return result
