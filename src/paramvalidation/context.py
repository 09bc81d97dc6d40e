"""
Contains the `ValidationContext`, a fluent validator for flat maps of loosely typed values like the parameters of an
HTTP request.
"""
import logging
import operator
import re
from datetime import date, datetime, time
from decimal import Decimal
from functools import singledispatchmethod
from typing import Any, Callable, Optional, Pattern, TypeVar

from frozendict import frozendict
from typeguard import TypeCheckError, check_type

from .errors import GLOBAL_ERROR_KEY, ParamValidationError, ValidationStateError
from .messages import DEFAULT_MESSAGES, MessageCatalog
from .types import FieldValue, InputMap, MultiValueInputMap, ValidationRoutine
from .utils import patterns
from .utils.adapters import first_values

ParsedT = TypeVar("ParsedT")

_COERCION_ERRORS = (ValueError, ArithmeticError, TypeError)


def _parse_strict(pattern: str, raw: str, parser: Callable[[str], ParsedT]) -> ParsedT:
    if re.fullmatch(pattern, raw) is None:
        raise ValueError(f"'{raw}' does not match {pattern}")
    return parser(raw)


def _align_dates(value: Optional[date], limit: date) -> Optional[date]:
    """
    Makes a date comparable to the limit. Plain dates are compared to a datetime limit at midnight.
    """
    if value is None:
        return None
    if isinstance(limit, datetime) and not isinstance(value, datetime):
        return datetime.combine(value, time(), tzinfo=limit.tzinfo)
    if isinstance(value, datetime) and not isinstance(limit, datetime):
        return value.date()
    return value


# pylint: disable=too-many-public-methods
class ValidationContext:
    """
    Wraps one input map and validates it field by field. You select a field with `select` and chain the checks
    which should apply to it. Every check returns the context itself, so a whole validation reads like:
    ```
    context = ValidationContext(request_params)
    context.select("name").required().letters_spaces().max_length(50)
    context.select("age").required().coerce_integer().min(18)
    context.check()
    ```
    Field errors are never raised. They are collected in `errors` (one message per field) so a single pass reports
    the problems of all fields. The first error of a field wins: as long as the field is selected, all further
    checks are skipped and only a single `with_message` may rephrase the pending message.
    Checks skip absent values, use `required` to enforce presence.

    Entries whose value is an empty string are removed on construction, i.e. absent and empty fields are treated the
    same. The coercion checks replace the raw strings by the parsed values, `values` returns these afterwards.
    """

    def __init__(
        self,
        raw_map: Optional[InputMap] = None,
        *,
        messages: MessageCatalog = DEFAULT_MESSAGES,
        diagnostics: Optional[logging.Logger] = None,
    ):
        """
        `diagnostics` is an optional logger which receives the internal failures of validation routines and the
        coercion failures which get reported with the generic message.
        """
        self._values: dict[str, FieldValue] = {
            field: value for field, value in (raw_map or {}).items() if value != ""
        }
        self._errors: dict[str, str] = {}
        self._messages = messages
        self._diagnostics = diagnostics
        self._selected_field: Optional[str] = None
        self._has_custom_message = False
        self._processed = False

    @classmethod
    def from_multi_map(
        cls,
        multi_map: MultiValueInputMap,
        *,
        messages: MessageCatalog = DEFAULT_MESSAGES,
        diagnostics: Optional[logging.Logger] = None,
    ) -> "ValidationContext":
        """
        Creates a context from a map of value sequences (e.g. query parameters). Only the first value of each field
        is kept, fields without values are dropped.
        """
        return cls(first_values(multi_map), messages=messages, diagnostics=diagnostics)

    def __repr__(self):
        return f"ValidationContext(values={self._values!r}, errors={self._errors!r})"

    @property
    def values(self) -> frozendict[str, FieldValue]:
        """Snapshot of the current (possibly coerced) values"""
        return frozendict(self._values)

    @property
    def errors(self) -> frozendict[str, str]:
        """Snapshot of the pending error messages per field"""
        return frozendict(self._errors)

    @property
    def selected_field(self) -> Optional[str]:
        """The field the checks currently apply to"""
        return self._selected_field

    @property
    def processed(self) -> bool:
        """True as soon as any check has been executed on this context"""
        return self._processed

    @property
    def messages(self) -> MessageCatalog:
        """The message templates in use"""
        return self._messages

    # region raw access

    def get(self, field: str) -> FieldValue:
        """Returns the value of the field as it is stored, None if absent"""
        return self._values.get(field)

    def set(self, field: str, value: FieldValue) -> "ValidationContext":
        """
        Adds or replaces the value of a field. Raises a TypeError if the value is not a supported field value.
        """
        try:
            check_type(value, FieldValue)
        except TypeCheckError as error:
            raise TypeError(f"{field}: {error}") from error
        self._values[field] = value
        return self

    def remove(self, *fields: str) -> "ValidationContext":
        """Removes the given fields from the values. Unknown fields are ignored."""
        for field in fields:
            self._values.pop(field, None)
        return self

    def set_error(self, field: str, message: str) -> "ValidationContext":
        """
        Adds or replaces the error message of a field. This marks the context as processed.
        """
        if message is None:
            raise TypeError(f"{field}: error message must not be None")
        self._processed = True
        self._errors[field] = message
        return self

    def get_error(self, field: str) -> Optional[str]:
        return self._errors.get(field)

    def has_error(self, field: str) -> bool:
        return field in self._errors

    def is_empty(self, field: str) -> bool:
        """True if the field is absent or its string form is empty. This is no check, it sets no error."""
        value = self.get(field)
        return value is None or str(value) == ""

    def has_value(self, field: str) -> bool:
        return not self.is_empty(field)

    # endregion

    # region typed accessors

    def as_string(self, field: str) -> Optional[str]:
        return None if self.is_empty(field) else str(self.get(field))

    def as_integer(self, field: str) -> Optional[int]:
        """
        Returns the field as int, None if it is empty. Raises a ValueError if the value is no integer literal.
        """
        if self.is_empty(field):
            return None
        value = self.get(field)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return _parse_strict(patterns.INTEGER, str(value), int)

    def as_decimal(self, field: str) -> Optional[Decimal]:
        """
        Returns the field as Decimal, None if it is empty. Raises a ValueError if the value is no decimal literal.
        """
        if self.is_empty(field):
            return None
        value = self.get(field)
        if isinstance(value, Decimal):
            return value
        return _parse_strict(patterns.DECIMAL, str(value), Decimal)

    def as_boolean(self, field: str) -> Optional[bool]:
        """
        Returns the field as bool, None if it is empty. "true" (case-insensitive) is True, "false" is False. Any
        other value is True only if it is the integer 1; a value which is no integer raises a ValueError.
        """
        if self.is_empty(field):
            return None
        lowered = str(self.get(field)).lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        return self.as_integer(field) == 1

    def as_date(self, field: str) -> Optional[date]:
        """
        Returns the field as date, parsed from the format YYYY-MM-DD. Already parsed dates are returned as they are.
        If the value can't be parsed, an error is set on the field and None is returned. Nothing is raised, so check
        the errors afterwards.
        """
        if self.is_empty(field):
            return None
        value = self.get(field)
        if isinstance(value, date):
            return value
        try:
            return _parse_strict(patterns.ISO_DATE, str(value), date.fromisoformat)
        except ValueError:
            self._fail(field, self._messages.invalid_date)
            return None

    def as_time(self, field: str) -> Optional[time]:
        """
        Returns the field as time, parsed from the format HH:MM:SS. Values in the format HH:MM get the seconds
        appended. Already parsed times are returned as they are, datetimes are reduced to their time. If the value can't be parsed, an error is set on
        the field and None is returned.
        """
        if self.is_empty(field):
            return None
        value = self.get(field)
        if isinstance(value, datetime):
            return value.timetz()
        if isinstance(value, time):
            return value
        raw = str(value)
        if len(raw) == 5:
            raw += ":00"
        try:
            return _parse_strict(patterns.ISO_TIME, raw, time.fromisoformat)
        except ValueError:
            self._fail(field, self._messages.invalid_time)
            return None

    # endregion

    # region internals

    def _current_field(self) -> str:
        if self._selected_field is None:
            raise ValidationStateError("no field has been selected")
        return self._selected_field

    def _skip_check(self, field: str, *operands: Any) -> bool:
        """
        The common prologue of the checks. Marks the context as processed and tells if the check has to be skipped,
        either because the field already has an error or because one of the operands is None.
        """
        self._processed = True
        if self._errors.get(field) is not None:
            return True
        return any(operand is None for operand in operands)

    def _fail(self, field: str, template: str, **kwargs: Any) -> None:
        if self._errors.get(field) is None:
            self.set_error(field, template.format(field=field, **kwargs))

    def _fail_internally(self, field: str, error: Exception) -> None:
        if self._diagnostics is not None:
            self._diagnostics.debug("Could not validate '%s': %s", field, error)
        self._fail(field, self._messages.validation_failed)

    def _coerce(self, read: Callable[[str], Any], template: str) -> "ValidationContext":
        field = self._current_field()
        if self._skip_check(field):
            return self
        try:
            value = read(field)
        except _COERCION_ERRORS:
            self._fail(field, template)
            return self
        if value is not None:
            self._values[field] = value
        return self

    # pylint: disable=too-many-arguments
    def _compare(
        self,
        read: Callable[[str], Any],
        violates: Callable[[Any, Any], bool],
        limit: Any,
        template: str,
        rendered_limit: str,
    ) -> "ValidationContext":
        field = self._current_field()
        if self._skip_check(field, self.get(field)):
            return self
        try:
            value = read(field)
            if value is not None and violates(value, limit):
                self._fail(field, template, limit=rendered_limit)
        except _COERCION_ERRORS as error:
            self._fail_internally(field, error)
        return self

    def _check_length(self, limit: Optional[int], violates: Callable[[int, int], bool], template: str):
        field = self._current_field()
        if self._skip_check(field, limit, self.get(field)):
            return self
        if violates(len(str(self.get(field))), limit):
            self._fail(field, template, limit=limit)
        return self

    # endregion

    # region checks

    def select(self, field: str) -> "ValidationContext":
        """
        Selects the field all following checks apply to. This also restores the budget for one `with_message`.
        """
        self._selected_field = field
        self._has_custom_message = False
        return self

    def required(self) -> "ValidationContext":
        """The field must be present and not empty"""
        field = self._current_field()
        if self._skip_check(field):
            return self
        if self.is_empty(field):
            self._fail(field, self._messages.required)
        return self

    def matches_pattern(self, pattern: str | Pattern[str]) -> "ValidationContext":
        """
        The whole value must match the regular expression. Empty fields are skipped.
        """
        field = self._current_field()
        if self._skip_check(field) or self.is_empty(field):
            return self
        value = str(self.get(field))
        if isinstance(pattern, re.Pattern):
            matched = pattern.fullmatch(value)
        else:
            matched = re.fullmatch(f"^{pattern}$", value)
        if matched is None:
            self._fail(field, self._messages.invalid_characters)
        return self

    def no_whitespace(self) -> "ValidationContext":
        return self.matches_pattern(patterns.NO_WHITESPACE)

    def no_digits(self) -> "ValidationContext":
        return self.matches_pattern(patterns.NO_DIGITS)

    def letters_digits_spaces(self) -> "ValidationContext":
        """Letters (including accented ones), digits, spaces and apostrophes only"""
        return self.matches_pattern(patterns.LETTERS_DIGITS_SPACES)

    def letters_digits(self) -> "ValidationContext":
        """Letters (including accented ones), digits and apostrophes only"""
        return self.matches_pattern(patterns.LETTERS_DIGITS)

    def letters_spaces(self) -> "ValidationContext":
        """Letters (including accented ones), spaces and apostrophes only"""
        return self.matches_pattern(patterns.LETTERS_SPACES)

    def letters(self) -> "ValidationContext":
        """Letters (including accented ones) only"""
        return self.matches_pattern(patterns.LETTERS)

    def safe_text(self) -> "ValidationContext":
        """Any text without angle brackets and quotes"""
        return self.matches_pattern(patterns.SAFE_TEXT)

    def coerce_integer(self) -> "ValidationContext":
        """The value must be an integer. It gets replaced by the parsed int."""
        return self._coerce(self.as_integer, self._messages.invalid_number)

    def coerce_decimal(self) -> "ValidationContext":
        """The value must be a decimal number. It gets replaced by the parsed Decimal."""
        return self._coerce(self.as_decimal, self._messages.invalid_number)

    def coerce_date(self) -> "ValidationContext":
        """The value must be a date (YYYY-MM-DD). It gets replaced by the parsed date."""
        return self._coerce(self.as_date, self._messages.invalid_date)

    def coerce_time(self) -> "ValidationContext":
        """The value must be a time (HH:MM:SS or HH:MM). It gets replaced by the parsed time."""
        return self._coerce(self.as_time, self._messages.invalid_time)

    def default_value(self, value: FieldValue) -> "ValidationContext":
        """
        Sets the value of an absent or empty field. Fields which already have an error are left untouched.
        This is no check, it doesn't mark the context as processed.
        """
        field = self._current_field()
        if self._errors.get(field) is None and self.is_empty(field):
            self.set(field, value)
        return self

    def equals(self, expected: Any) -> "ValidationContext":
        field = self._current_field()
        if self._skip_check(field, expected, self.get(field)):
            return self
        if str(self.get(field)) != str(expected):
            self._fail(field, self._messages.not_equal, expected=expected)
        return self

    def not_equals(self, unexpected: Any) -> "ValidationContext":
        field = self._current_field()
        if self._skip_check(field, unexpected, self.get(field)):
            return self
        if str(self.get(field)) == str(unexpected):
            self._fail(field, self._messages.equal, expected=unexpected)
        return self

    def min_length(self, limit: Optional[int]) -> "ValidationContext":
        return self._check_length(limit, operator.lt, self._messages.too_short)

    def max_length(self, limit: Optional[int]) -> "ValidationContext":
        return self._check_length(limit, operator.gt, self._messages.too_long)

    def exact_length(self, limit: Optional[int]) -> "ValidationContext":
        return self._check_length(limit, operator.ne, self._messages.wrong_length)

    @singledispatchmethod
    def min(self, limit: Any) -> "ValidationContext":
        """
        The value must not be less than the limit. The type of the limit decides how the value is read: as int,
        as Decimal (also for float limits) or as date. Date limits forbid earlier dates. A value which can't be
        read that way gets the generic validation message.
        """
        if limit is None:
            self._skip_check(self._current_field())
            return self
        raise TypeError(f"Unsupported limit type {type(limit).__name__}")

    @min.register(int)
    def _min_int(self, limit: int) -> "ValidationContext":
        return self._compare(self.as_integer, operator.lt, limit, self._messages.less_than_min, str(limit))

    @min.register(Decimal)
    def _min_decimal(self, limit: Decimal) -> "ValidationContext":
        return self._compare(self.as_decimal, operator.lt, limit, self._messages.less_than_min, str(limit))

    @min.register(float)
    def _min_float(self, limit: float) -> "ValidationContext":
        return self._min_decimal(Decimal(str(limit)))

    @min.register(date)
    def _min_date(self, limit: date) -> "ValidationContext":
        return self._compare(
            lambda field: _align_dates(self.as_date(field), limit),
            operator.lt,
            limit,
            self._messages.before_min,
            self._messages.render_date(limit),
        )

    @singledispatchmethod
    def max(self, limit: Any) -> "ValidationContext":
        """
        The value must not be greater than the limit. See `min` for how the type of the limit is treated. Date
        limits forbid later dates.
        """
        if limit is None:
            self._skip_check(self._current_field())
            return self
        raise TypeError(f"Unsupported limit type {type(limit).__name__}")

    @max.register(int)
    def _max_int(self, limit: int) -> "ValidationContext":
        return self._compare(self.as_integer, operator.gt, limit, self._messages.greater_than_max, str(limit))

    @max.register(Decimal)
    def _max_decimal(self, limit: Decimal) -> "ValidationContext":
        return self._compare(self.as_decimal, operator.gt, limit, self._messages.greater_than_max, str(limit))

    @max.register(float)
    def _max_float(self, limit: float) -> "ValidationContext":
        return self._max_decimal(Decimal(str(limit)))

    @max.register(date)
    def _max_date(self, limit: date) -> "ValidationContext":
        return self._compare(
            lambda field: _align_dates(self.as_date(field), limit),
            operator.gt,
            limit,
            self._messages.after_max,
            self._messages.render_date(limit),
        )

    def exists(self, obj: Any) -> "ValidationContext":
        """
        The externally supplied object must not be None. Use this to fold lookups into the error map, e.g.
        `context.select("user_id").exists(repository.find(context.get("user_id")))`.
        """
        field = self._current_field()
        if self._skip_check(field, self.get(field)):
            return self
        if obj is None:
            self._fail(field, self._messages.not_found)
        return self

    def not_exists(self, obj: Any) -> "ValidationContext":
        """The externally supplied object must be None"""
        field = self._current_field()
        if self._skip_check(field, self.get(field)):
            return self
        if obj is not None:
            self._fail(field, self._messages.unexpected)
        return self

    def satisfies(self, condition: bool) -> "ValidationContext":
        """The precomputed condition must hold"""
        field = self._current_field()
        if self._skip_check(field, self.get(field)):
            return self
        if not condition:
            self._fail(field, self._messages.condition_failed)
        return self

    def with_message(self, template: str, *args: Any) -> "ValidationContext":
        """
        Replaces the pending error message of the selected field by `template.format(*args, field=<field>)`.
        The template is only formatted if arguments are given or it contains `{field}`, so other templates may hold
        literal braces.
        Has no effect if the field has no error or if the message has already been replaced since the field has
        been selected.
        """
        field = self._current_field()
        if self._errors.get(field) is not None and not self._has_custom_message:
            message = template.format(*args, field=field) if args or "{field}" in template else template
            self.set_error(field, message)
            self._has_custom_message = True
        return self

    # endregion

    # region status

    def validate(self, *routines: ValidationRoutine) -> "ValidationContext":
        """
        Applies the given validation routines to this context. Field errors are only collected, nothing is raised
        because of them (unless a routine calls `check`). If a routine fails unexpectedly, the global error is set
        and a ParamValidationError is raised. ParamValidationErrors raised by a routine for this context are passed on
        unchanged. Errors carrying another context (e.g. a ValidationStateError after a check without `select`) get
        their global message copied into this context and are raised as a ParamValidationError of this context.
        """
        for routine in routines:
            try:
                routine(self)
            except ParamValidationError as error:
                if error.context is self:
                    raise
                self.set_error(
                    GLOBAL_ERROR_KEY, error.context.get_error(GLOBAL_ERROR_KEY) or self._messages.global_error
                )
                raise ParamValidationError(self) from error
            except Exception as error:  # pylint: disable=broad-exception-caught
                self.set_error(GLOBAL_ERROR_KEY, self._messages.global_error)
                if self._diagnostics is not None:
                    self._diagnostics.error("Error while validating: %s", error, exc_info=error)
                raise ParamValidationError(self) from error
        return self

    def is_valid(self) -> bool:
        """
        Returns True if there are no errors. Raises a ValidationStateError if no check has been executed yet.
        """
        if not self._processed:
            raise ValidationStateError(self._messages.not_processed)
        return not self._errors

    def check(self) -> "ValidationContext":
        """
        Raises a ParamValidationError if there are errors, otherwise returns the context. Call it anywhere in the
        chain to stop the validation at that point.
        """
        if not self.is_valid():
            raise ParamValidationError(self)
        return self

    # endregion
