"""
Plan builder.

Normalizes raw rule and action specifications into one FieldPlan per
field. Plans are built once per validation session.

Rule specifications map a field path to either a pipe-delimited string:

    {"avatar": "required|mimes:png,jpg|max:2048"}

or a mapping of rule name to argument list:

    {"avatar": {"required": [], "mimes": ["png", "jpg"], "max": [2048]}}

Action specifications map a field path to one descriptor or a list of them:

    {"avatar": [{"action": "move", "args": ["avatars"]}, {"action": "delete"}]}
"""

import inspect
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

from modules.file_validation.core.base import ActionSpec, FieldPlan, RuleSpec, UNDEFINED
from modules.file_validation.core.messages import MessageResolver
from shared.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_key(key: str, data: Any) -> Any:
    """
    Get a value from data using dot notation.

    Supports nested mappings and list indices: "file.meta.size", "files.0.name".
    Empty segments are ignored.

    Args:
        key: Field path in dot notation
        data: Field data

    Returns:
        The value, or UNDEFINED when any segment is missing
    """
    segments = [segment for segment in key.split('.') if segment != '']

    if not segments:
        return UNDEFINED

    value = data
    for segment in segments:
        if isinstance(value, Mapping):
            if segment not in value:
                return UNDEFINED
            value = value[segment]
        elif isinstance(value, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(value):
                return UNDEFINED
            value = value[index]
        else:
            return UNDEFINED

    return value


def collapse_args(args: Sequence[Any]) -> Any:
    """Collapse a one-element argument list to a scalar; empty lists mean no arguments."""
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return list(args)


class PlanBuilder:
    """
    Builds the per-field execution plans.

    Args:
        required_names: Names of the registered required-determiners; these
                        rules are ordered before every other rule of a field
        resolver: Message resolver used to fill rule messages
    """

    def __init__(self, required_names: Collection[str], resolver: Optional[MessageResolver] = None):
        self.required_names = frozenset(required_names)
        self.resolver = resolver or MessageResolver()

    def build(
        self,
        fields: Any,
        rules: Optional[Mapping[str, Any]] = None,
        delete_on_fail: bool = False,
        messages: Optional[Mapping[str, str]] = None,
        actions: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, FieldPlan]:
        """
        Build plans for every field named in the rule or action specification.

        Args:
            fields: Field data the plan values are read from
            rules: Raw rule specification
            delete_on_fail: Flag passed through to validators
            messages: Message table
            actions: Raw action specification

        Returns:
            Plans keyed by field path, in order of first appearance
        """
        plans: Dict[str, FieldPlan] = {}

        for field, spec in (rules or {}).items():
            plan = plans.get(field)
            if plan is None:
                plan = plans[field] = FieldPlan(
                    field=field,
                    value=parse_key(field, fields),
                    delete_on_fail=delete_on_fail,
                )

            for rule in self.parse_rules(spec):
                message = self.resolver.resolve(field, rule.rule, messages, plan.value)
                self._add_rule(plan, RuleSpec(rule=rule.rule, args=rule.args, message=message))

        for field, spec in (actions or {}).items():
            plan = plans.get(field)
            if plan is None:
                plan = plans[field] = FieldPlan(
                    field=field,
                    value=parse_key(field, fields),
                )

            plan.actions.extend(self.parse_actions(field, spec))

        logger.debug(f"Built {len(plans)} field plans")
        return plans

    def parse_rules(self, spec: Any) -> List[RuleSpec]:
        """
        Parse one field's rule specification.

        Args:
            spec: Pipe-delimited string or mapping of rule name to arguments

        Returns:
            Parsed rules without messages, in declaration order
        """
        parsed: List[RuleSpec] = []

        if spec is None:
            return parsed

        if isinstance(spec, Mapping):
            for name, args in spec.items():
                if isinstance(args, (list, tuple)):
                    parsed.append(RuleSpec(rule=str(name), args=collapse_args(args)))
                elif args is None or args == '':
                    parsed.append(RuleSpec(rule=str(name)))
                else:
                    parsed.append(RuleSpec(rule=str(name), args=args))
            return parsed

        for part in str(spec).split('|'):
            name, separator, raw_args = part.partition(':')
            name = name.strip()

            if not name:
                continue

            if separator and raw_args.strip():
                args = [arg.strip() for arg in raw_args.split(',')]
                parsed.append(RuleSpec(rule=name, args=collapse_args(args)))
            else:
                parsed.append(RuleSpec(rule=name))

        return parsed

    def parse_actions(self, field: str, spec: Any) -> List[ActionSpec]:
        """
        Parse one field's action specification.

        Args:
            field: Field path (for logging)
            spec: Action descriptor or list of descriptors

        Returns:
            Parsed actions in declaration order
        """
        descriptors = spec if isinstance(spec, (list, tuple)) else [spec]
        parsed: List[ActionSpec] = []

        for descriptor in descriptors:
            if descriptor is None:
                continue

            if not isinstance(descriptor, Mapping) or not descriptor.get('action'):
                logger.warning(f"Ignoring malformed action for '{field}': {descriptor!r}")
                continue

            callback = descriptor.get('callback')
            if callback is not None and not inspect.iscoroutinefunction(callback):
                logger.warning(
                    f"Ignoring callback for action '{descriptor['action']}' on '{field}': "
                    "callbacks must be async functions"
                )
                callback = None

            parsed.append(ActionSpec(
                action=str(descriptor['action']),
                args=descriptor.get('args'),
                callback=callback,
            ))

        return parsed

    def _add_rule(self, plan: FieldPlan, rule: RuleSpec) -> None:
        if rule.rule in self.required_names:
            position = sum(1 for existing in plan.rules if existing.rule in self.required_names)
            plan.rules.insert(position, rule)
        else:
            plan.rules.append(rule)
