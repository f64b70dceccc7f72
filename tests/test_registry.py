"""
Tests for rule and action registration.
"""

import pytest

from modules.file_validation import FileValidator
from modules.file_validation.core.base import BaseValidationRule
from modules.file_validation.core.exceptions import RegistryException
from modules.file_validation.core.registry import (
    VALIDATION_RULES,
    RuleRegistry,
    get_default_registry,
    is_registered,
    list_actions,
    list_required_rules,
    list_rules,
    register_rule,
)


def test_default_registry_holds_built_ins():
    registry = get_default_registry()

    assert {"required", "sometimes", "required_with", "required_if"} <= set(registry.required)
    assert {"file", "image", "mimes", "max", "min", "string"} <= set(registry.rules)
    assert {"move", "copy", "delete"} <= set(registry.actions)
    assert list_required_rules()["required"] == "RequiredRule"
    assert list_rules()["max"] == "MaxRule"
    assert list_actions()["move"] == "MoveAction"
    assert is_registered("mimes")
    assert not is_registered("bogus")


def test_register_rule_requires_rule_class():
    with pytest.raises(RegistryException):
        @register_rule("not_a_rule")
        class NotARule:
            pass

    assert "not_a_rule" not in VALIDATION_RULES


@pytest.mark.asyncio
async def test_registered_rule_is_used_by_default_registry(ctx, storage):
    @register_rule("even")
    class EvenRule(BaseValidationRule):
        default_message = "The :attribute must be even"

        async def check(self, field, value, args):
            return value % 2 == 0

    try:
        validator = FileValidator(ctx, {"a": 2, "b": 3}, {"a": "even", "b": "even"}, storage=storage)

        assert await validator.validate() is False
        assert [(error.field, error.message) for error in validator.errors] == [("b", "The b must be even")]
    finally:
        VALIDATION_RULES.pop("even", None)


@pytest.mark.asyncio
async def test_rule_classes_can_be_added_under_other_names(ctx, storage):
    class Positive(BaseValidationRule):
        default_message = "The :attribute must be positive"

        async def check(self, field, value, args):
            return value > 0

    registry = get_default_registry().extend(rules={"positive": Positive})
    validator = FileValidator(ctx, {"a": -1}, {"a": "positive"}, registry=registry, storage=storage)

    assert await validator.validate() is False
    assert validator.errors[0].name == "positive"


def test_non_callable_entries_are_rejected(ctx, storage):
    with pytest.raises(RegistryException):
        FileValidator(ctx, {}, {}, registry=RuleRegistry(rules={"broken": 42}), storage=storage)
