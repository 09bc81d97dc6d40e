from datetime import date

import pytest
from typeguard import TypeCheckError

from paramvalidation import DEFAULT_MESSAGES, ValidationContext, first_values, optional_value, required_value


class TestAdapters:
    def test_first_values(self):
        assert first_values({"a": ["1", "2"], "b": [], "c": None, "d": ("x",)}) == {"a": "1", "d": "x"}


class TestQueryObject:
    @pytest.fixture
    def context(self) -> ValidationContext:
        context = ValidationContext({"age": "42", "birthday": "1982-05-17"})
        context.select("age").coerce_integer()
        context.select("birthday").coerce_date()
        return context

    def test_required_value(self, context: ValidationContext):
        assert required_value(context, "age", int) == 42
        assert required_value(context, "birthday", date) == date(1982, 5, 17)

    def test_required_value_of_absent_field(self, context: ValidationContext):
        with pytest.raises(KeyError):
            required_value(context, "name", str)

    def test_required_value_of_wrong_type(self, context: ValidationContext):
        with pytest.raises(TypeCheckError) as exc_info:
            required_value(context, "age", str)
        assert str(exc_info.value).startswith("age: ")

    def test_optional_value(self, context: ValidationContext):
        assert optional_value(context, "age", int) == 42
        assert optional_value(context, "age", str) is None
        assert optional_value(context, "name", str) is None


class TestMessageCatalog:
    def test_with_overrides(self):
        messages = DEFAULT_MESSAGES.with_overrides(required="missing: {field}")
        assert messages.required == "missing: {field}"
        assert messages.invalid_date == DEFAULT_MESSAGES.invalid_date
        assert DEFAULT_MESSAGES.required == "you must enter a value for '{field}'"

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            DEFAULT_MESSAGES.with_overrides(does_not_exist="foo")
