import logging

import pytest

from paramvalidation import GLOBAL_ERROR_KEY, ParamValidationError, ValidationContext, ValidationStateError


class TestStatus:
    def test_is_valid_requires_a_check(self):
        context = ValidationContext({"name": "Ana"})
        with pytest.raises(ValidationStateError) as exc_info:
            context.is_valid()
        assert exc_info.value.errors == {GLOBAL_ERROR_KEY: "no validation was executed"}
        assert context.errors == {}

    def test_valid_context(self):
        context = ValidationContext({"name": "Ana"})
        context.select("name").required()
        assert context.is_valid() is True
        assert context.errors == {}
        assert context.check() is context

    def test_check_raises_with_the_context(self):
        context = ValidationContext({})
        context.select("x").required()
        assert context.errors == {"x": "you must enter a value for 'x'"}
        with pytest.raises(ParamValidationError) as exc_info:
            context.check()
        assert exc_info.value.context is context
        assert exc_info.value.errors == context.errors
        assert str(exc_info.value) == "x: you must enter a value for 'x'"

    def test_check_stops_the_chain(self):
        context = ValidationContext({"b": "1"})
        with pytest.raises(ParamValidationError):
            context.select("a").required().check().select("b").coerce_integer()
        assert context.get("b") == "1"

    def test_set_error_marks_as_processed(self):
        context = ValidationContext()
        context.set_error("x", "external problem")
        assert context.is_valid() is False
        assert context.has_error("x")
        assert context.get_error("x") == "external problem"


class TestValidate:
    def test_routines_are_applied(self):
        def validate_name(context: ValidationContext) -> None:
            context.select("name").required().letters_spaces()

        def validate_age(context: ValidationContext) -> None:
            context.select("age").required().coerce_integer().min(18)

        context = ValidationContext({"name": "Ana María", "age": "42"}).validate(validate_name, validate_age)
        assert context.is_valid()
        assert context.values == {"name": "Ana María", "age": 42}

    def test_unexpected_failure_becomes_a_global_error(self, caplog):
        def broken_routine(context: ValidationContext) -> None:
            context.select("a").required()
            raise RuntimeError("database is down")

        context = ValidationContext({"a": "1"}, diagnostics=logging.getLogger("test_diagnostics"))
        with caplog.at_level(logging.ERROR, logger="test_diagnostics"):
            with pytest.raises(ParamValidationError) as exc_info:
                context.validate(broken_routine)
        assert exc_info.value.context is context
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert context.errors == {GLOBAL_ERROR_KEY: "a general error has occurred, please try again later"}
        assert "database is down" in caplog.text

    def test_validation_errors_are_passed_on(self):
        def stopping_routine(context: ValidationContext) -> None:
            context.select("a").required().check()

        context = ValidationContext({})
        with pytest.raises(ParamValidationError) as exc_info:
            context.validate(stopping_routine)
        assert exc_info.value.context is context
        assert GLOBAL_ERROR_KEY not in context.errors

    def test_custom_messages(self):
        messages = ValidationContext().messages.with_overrides(required="Debe ingresar un valor para '{field}'")
        context = ValidationContext({}, messages=messages)
        context.select("nombre").required()
        assert context.errors == {"nombre": "Debe ingresar un valor para 'nombre'"}

    def test_state_errors_are_attached_to_the_validated_context(self):
        def unselected_routine(context: ValidationContext) -> None:
            context.required()

        context = ValidationContext({"a": "1"})
        with pytest.raises(ParamValidationError) as exc_info:
            context.validate(unselected_routine)
        assert exc_info.value.context is context
        assert isinstance(exc_info.value.__cause__, ValidationStateError)
        assert context.errors == {GLOBAL_ERROR_KEY: "no field has been selected"}

    def test_check_requires_a_check(self):
        with pytest.raises(ValidationStateError):
            ValidationContext({"a": "1"}).check()

    def test_generic_message_is_reported_to_diagnostics(self, caplog):
        context = ValidationContext({"n": "ten"}, diagnostics=logging.getLogger("test_diagnostics"))
        with caplog.at_level(logging.DEBUG, logger="test_diagnostics"):
            context.select("n").min(10)
        assert context.errors == {"n": "an error occurred while validating 'n'"}
        assert "Could not validate 'n'" in caplog.text
