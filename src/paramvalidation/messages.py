"""
Contains the message templates used by the `ValidationContext`. Replace single templates with
`MessageCatalog.with_overrides` to localize or rephrase the messages. The conditions under which an error is set
and the field it is set on never depend on the catalog.
"""
import dataclasses
from dataclasses import dataclass
from datetime import date, datetime


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True)
class MessageCatalog:
    """
    Holds the `str.format` templates for every error message. Available placeholders are `{field}` (the field the
    error is set on), `{limit}` (the bound of a length or range check) and `{expected}` (the operand of
    `equals`/`not_equals`).
    """

    required: str = "you must enter a value for '{field}'"
    invalid_characters: str = "the value of '{field}' contains invalid characters"
    invalid_number: str = "the value of '{field}' is not a valid number"
    invalid_date: str = "'{field}' is not a valid date"
    invalid_time: str = "'{field}' is not a valid time"
    not_equal: str = "the value of '{field}' should be equal to '{expected}'"
    equal: str = "the value of '{field}' should be different from '{expected}'"
    too_short: str = "the value of '{field}' must be at least {limit} characters long"
    too_long: str = "the value of '{field}' must be at most {limit} characters long"
    wrong_length: str = "the value of '{field}' must be exactly {limit} characters long"
    less_than_min: str = "cannot be less than {limit}"
    greater_than_max: str = "cannot be greater than {limit}"
    before_min: str = "cannot be earlier than {limit}"
    after_max: str = "cannot be later than {limit}"
    not_found: str = "no valid value was found for '{field}'"
    unexpected: str = "an unexpected value was found for '{field}'"
    condition_failed: str = "the required condition is not met for '{field}'"
    validation_failed: str = "an error occurred while validating '{field}'"
    global_error: str = "a general error has occurred, please try again later"
    not_processed: str = "no validation was executed"
    date_display_format: str = "%d/%m/%Y"
    datetime_display_format: str = "%d/%m/%Y - %H:%M"

    def with_overrides(self, **templates: str) -> "MessageCatalog":
        """
        Returns a copy of this catalog in which the given templates are replaced.
        Raises a ValueError if one of the names is not a template of the catalog.
        """
        known = {catalog_field.name for catalog_field in dataclasses.fields(self)}
        if not set(templates) <= known:
            raise ValueError(f"Unknown message template(s) {sorted(set(templates) - known)}")
        return dataclasses.replace(self, **templates)

    def render_date(self, value: date) -> str:
        """
        Formats a date (or datetime) limit for the use in a message.
        """
        if isinstance(value, datetime):
            return value.strftime(self.datetime_display_format)
        return value.strftime(self.date_display_format)


DEFAULT_MESSAGES = MessageCatalog()
