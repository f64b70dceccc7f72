"""
Message resolution for rule failures.

Templates are looked up per ``field.rule`` first, then per bare ``rule``,
and support the ``:attribute`` and ``:value`` placeholders.
"""

import json
from typing import Any, Mapping, Optional

from modules.file_validation.core.base import UNDEFINED


def render_value(value: Any) -> str:
    """
    Render a field value for the ``:value`` placeholder.

    Structured values (mappings, lists and null) are rendered as compact JSON,
    an absent value as ``undefined``.
    """
    if value is UNDEFINED:
        return 'undefined'
    if value is None or isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(',', ':'), default=str)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class MessageResolver:
    """
    Resolves the custom message for a (field, rule) pair.

    Args:
        defaults: Message table consulted after the per-session table,
                  usually the global messages from the validation profiles
    """

    def __init__(self, defaults: Optional[Mapping[str, str]] = None):
        self.defaults = dict(defaults or {})

    def lookup(self, field: str, rule: str, messages: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Find the raw template for a field/rule pair, session table first"""
        for table in (messages or {}, self.defaults):
            message = table.get(f"{field}.{rule}") or table.get(rule)
            if message:
                return message
        return None

    def resolve(
        self,
        field: str,
        rule: str,
        messages: Optional[Mapping[str, str]],
        value: Any
    ) -> Optional[str]:
        """
        Resolve and fill the message template for a rule.

        Args:
            field: Field path
            rule: Rule name
            messages: Message table for this session
            value: Current field value

        Returns:
            Filled message, or None when no template matches
        """
        message = self.lookup(field, rule, messages)

        if not message:
            return None

        if ':attribute' in message:
            message = message.replace(':attribute', field, 1)

        if ':value' in message:
            message = message.replace(':value', render_value(value), 1)

        return message
