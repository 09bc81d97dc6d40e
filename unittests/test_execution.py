import pytest

from paramvalidation import GLOBAL_ERROR_KEY, ValidationContext, ValidationManager


def validate_person(context: ValidationContext) -> None:
    context.select("name").required().letters_spaces().max_length(20)
    context.select("age").required().coerce_integer().min(18)


class TestValidationManager:
    def test_register(self):
        manager = ValidationManager()
        assert manager.register(validate_person) is manager
        assert manager.routines == (validate_person,)
        with pytest.raises(TypeError):
            manager.register("validate_person")  # type:ignore[arg-type]

    def test_validate_multiple_input_maps(self):
        manager = ValidationManager().register(validate_person)
        result = manager.validate(
            {"name": "Ana", "age": "17"},
            {"name": "Bob", "age": "42"},
            {"name": "", "age": "forty"},
        )
        assert result.total == 3
        assert result.num_succeeds == 1
        assert result.num_fails == 2
        assert result.succeeded_contexts[0].values == {"name": "Bob", "age": 42}
        assert result.failed_contexts[0].errors == {"age": "cannot be less than 18"}
        assert result.all_errors == [
            ("age", "cannot be less than 18"),
            ("age", "the value of 'age' is not a valid number"),
            ("name", "you must enter a value for 'name'"),
        ]
        assert result.num_errors_total == 3
        assert result.num_errors_per_field == {"age": 2, "name": 1}

    def test_early_stop_only_affects_one_input_map(self):
        def validate_with_stop(context: ValidationContext) -> None:
            context.select("a").required()
            context.check()
            context.select("b").required()

        manager = ValidationManager().register(validate_with_stop)
        result = manager.validate({"b": "x"}, {"a": "x"})
        assert [context.errors for context in result.contexts] == [
            {"a": "you must enter a value for 'a'"},
            {"b": "you must enter a value for 'b'"},
        ]

    def test_unexpected_failure_is_recorded(self):
        def broken_routine(context: ValidationContext) -> None:
            raise KeyError("oops")

        manager = ValidationManager().register(broken_routine).register(validate_person)
        result = manager.validate({"name": "Ana", "age": "42"})
        assert result.num_fails == 1
        assert list(result.failed_contexts[0].errors) == [GLOBAL_ERROR_KEY]

    def test_input_map_without_checks_is_valid(self):
        result = ValidationManager().validate({"a": "1"})
        assert result.num_succeeds == 1
        assert result.all_errors == []
        assert result.num_errors_per_field == {}

    def test_messages_are_passed_to_the_contexts(self):
        messages = ValidationManager().messages.with_overrides(less_than_min="at least {limit}")
        manager = ValidationManager(messages=messages).register(validate_person)
        result = manager.validate({"name": "Ana", "age": "17"})
        assert result.all_errors == [("age", "at least 18")]

    def test_check_without_selection_is_recorded(self):
        def unselected_routine(context: ValidationContext) -> None:
            context.required()

        result = ValidationManager().register(unselected_routine).validate({"a": "1"})
        assert result.num_succeeds == 0
        assert result.failed_contexts[0].errors == {GLOBAL_ERROR_KEY: "no field has been selected"}
