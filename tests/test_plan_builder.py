"""
Tests for rule and action specification parsing.
"""

import pytest

from modules.file_validation.core.base import UNDEFINED, RuleSpec
from modules.file_validation.core.plan import PlanBuilder, parse_key


@pytest.fixture
def builder():
    return PlanBuilder({"required", "sometimes"})


def test_parse_key_descends_mappings_and_lists():
    data = {"file": {"meta": {"size": 10}}, "files": [{"name": "a"}, {"name": "b"}], "empty": None}

    assert parse_key("file.meta.size", data) == 10
    assert parse_key("files.1.name", data) == "b"
    assert parse_key("empty", data) is None
    assert parse_key("file..meta.size", data) == 10


def test_parse_key_missing_segments_are_undefined():
    data = {"file": {"meta": None}, "files": []}

    assert parse_key("missing", data) is UNDEFINED
    assert parse_key("file.meta.size", data) is UNDEFINED
    assert parse_key("files.0", data) is UNDEFINED
    assert parse_key("file.name.first", data) is UNDEFINED
    assert parse_key("", data) is UNDEFINED
    assert parse_key("a", None) is UNDEFINED


def test_string_rules(builder):
    rules = builder.parse_rules("required|mimes:png,jpg|max:2048|nullable:|  string ")

    assert rules == [
        RuleSpec("required"),
        RuleSpec("mimes", ["png", "jpg"]),
        RuleSpec("max", "2048"),
        RuleSpec("nullable"),
        RuleSpec("string"),
    ]


def test_string_rules_split_on_first_colon_only(builder):
    assert builder.parse_rules("regex:^a:b$") == [RuleSpec("regex", "^a:b$")]


def test_structured_rules(builder):
    rules = builder.parse_rules({"required": [], "mimes": ["png", "jpg"], "max": [2048], "size": 10})

    assert rules == [
        RuleSpec("required"),
        RuleSpec("mimes", ["png", "jpg"]),
        RuleSpec("max", 2048),
        RuleSpec("size", 10),
    ]


def test_required_rules_move_to_front_in_order(builder):
    plans = builder.build({"a": 1}, {"a": "string|required|max:5|sometimes"})

    assert [rule.rule for rule in plans["a"].rules] == ["required", "sometimes", "string", "max"]


def test_messages_are_resolved_per_rule(builder):
    plans = builder.build(
        {"size": 100},
        {"size": {"required": [], "max": [50]}},
        messages={"size.max": ":attribute must be :value", "required": "need :attribute"},
    )

    assert [(rule.rule, rule.message) for rule in plans["size"].rules] == [
        ("required", "need size"),
        ("max", "size must be 100"),
    ]


def test_plans_share_fields_and_keep_order(builder):
    plans = builder.build(
        {"a": 1, "b": 2, "c": 3},
        {"b": "required", "a": "string"},
        delete_on_fail=True,
        actions={"c": {"action": "delete"}, "a": {"action": "move", "args": ["x"]}},
    )

    assert list(plans) == ["b", "a", "c"]
    assert [action.action for action in plans["a"].actions] == ["move"]
    assert plans["a"].delete_on_fail is True
    assert plans["c"].delete_on_fail is False
    assert plans["c"].rules == []


def test_empty_rule_specs_are_legal(builder):
    plans = builder.build({"a": 1}, {"a": "", "b": None, "c": {}})

    assert all(plan.rules == [] for plan in plans.values())
    assert plans["b"].value is UNDEFINED


def test_action_lists_use_each_element_args(builder):
    actions = builder.parse_actions("a", [
        {"action": "copy", "args": ["backup"]},
        {"action": "move", "args": ["final", "name.png"]},
        {"action": "delete"},
    ])

    assert [(action.action, action.args) for action in actions] == [
        ("copy", ["backup"]),
        ("move", ["final", "name.png"]),
        ("delete", None),
    ]


def test_only_async_callbacks_are_kept(builder):
    async def on_done():
        pass

    def sync_done():
        pass

    actions = builder.parse_actions("a", [
        {"action": "move", "callback": on_done},
        {"action": "move", "callback": sync_done},
    ])

    assert actions[0].callback is on_done
    assert actions[1].callback is None


def test_malformed_actions_are_ignored(builder):
    actions = builder.parse_actions("a", [None, "move", {"args": ["x"]}, {"action": "delete"}])

    assert [action.action for action in actions] == ["delete"]


def test_values_are_snapshotted(builder):
    fields = {"a": 1}
    plans = builder.build(fields, {"a": "string"})

    fields["a"] = 2

    assert plans["a"].value == 1
