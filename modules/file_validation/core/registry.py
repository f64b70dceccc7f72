"""
Rule and action registry system.

Provides decorator-based registration for the three registry namespaces
(required-determiners, validators, actions) and the RuleRegistry bundle a
validation session is constructed with. This allows for pluggable rules
without modifying core code.
"""

import inspect
from typing import Any, Callable, Dict, Mapping, Optional, Union, Type, TYPE_CHECKING

from modules.file_validation.core.base import (
    BaseAction,
    BaseRequiredRule,
    BaseRule,
    BaseValidationRule,
)
from modules.file_validation.core.exceptions import RegistryException
from shared.utils.logger import setup_logger

if TYPE_CHECKING:
    from modules.file_validation.engine import FileValidator

logger = setup_logger(__name__)

RegistryEntry = Union[Type[BaseRule], Callable[..., Any]]

# Global registries of all built-in rules and actions
REQUIRED_RULES: Dict[str, RegistryEntry] = {}
VALIDATION_RULES: Dict[str, RegistryEntry] = {}
ACTIONS: Dict[str, RegistryEntry] = {}


def _register(namespace: Dict[str, RegistryEntry], kind: str, name: str, base: Type[BaseRule]):
    def decorator(cls: Type[BaseRule]):
        if not (inspect.isclass(cls) and issubclass(cls, base)):
            raise RegistryException(
                f"{kind} '{name}' must subclass {base.__name__}, got {cls!r}"
            )

        if name in namespace:
            logger.warning(
                f"{kind} '{name}' is already registered. "
                f"Overwriting with {cls.__name__}"
            )

        cls.name = name
        namespace[name] = cls
        logger.debug(f"Registered {kind.lower()}: {name} -> {cls.__name__}")
        return cls

    return decorator


def register_required_rule(name: str):
    """
    Decorator to register a required-determiner in the global registry.

    Usage:
        @register_required_rule("required")
        class RequiredRule(BaseRequiredRule):
            async def __call__(self, field, value, args=None, message=None):
                ...
    """
    return _register(REQUIRED_RULES, "Required rule", name, BaseRequiredRule)


def register_rule(name: str):
    """
    Decorator to register a validator in the global registry.

    Usage:
        @register_rule("max")
        class MaxRule(BaseValidationRule):
            async def check(self, field, value, args):
                ...
    """
    return _register(VALIDATION_RULES, "Validation rule", name, BaseValidationRule)


def register_action(name: str):
    """
    Decorator to register an action in the global registry.

    Usage:
        @register_action("move")
        class MoveAction(BaseAction):
            async def __call__(self, field, value, delete_on_fail, args, callback=None):
                ...
    """
    return _register(ACTIONS, "Action", name, BaseAction)


def list_required_rules() -> Dict[str, str]:
    """List registered required-determiners as name -> class name"""
    return {name: _entry_name(entry) for name, entry in REQUIRED_RULES.items()}


def list_rules() -> Dict[str, str]:
    """List registered validators as name -> class name"""
    return {name: _entry_name(entry) for name, entry in VALIDATION_RULES.items()}


def list_actions() -> Dict[str, str]:
    """List registered actions as name -> class name"""
    return {name: _entry_name(entry) for name, entry in ACTIONS.items()}


def is_registered(name: str) -> bool:
    """
    Check if a name is registered in any namespace.

    Args:
        name: Rule or action name

    Returns:
        True if registered, False otherwise
    """
    return name in REQUIRED_RULES or name in VALIDATION_RULES or name in ACTIONS


def _entry_name(entry: RegistryEntry) -> str:
    return getattr(entry, '__name__', type(entry).__name__)


class RuleRegistry:
    """
    The three registry namespaces handed to a validation session.

    Entries are either BaseRule subclasses, instantiated with the session
    by bind(), or plain callables (sync or async) used as they are.

    Usage:
        registry = RuleRegistry(
            required={"present": lambda field, value, **kw: value is not None},
            rules={"even": is_even},
        )
        validator = FileValidator(ctx, fields, rules, registry=registry)
    """

    def __init__(
        self,
        required: Optional[Mapping[str, RegistryEntry]] = None,
        rules: Optional[Mapping[str, RegistryEntry]] = None,
        actions: Optional[Mapping[str, RegistryEntry]] = None
    ):
        self.required: Dict[str, RegistryEntry] = dict(required or {})
        self.rules: Dict[str, RegistryEntry] = dict(rules or {})
        self.actions: Dict[str, RegistryEntry] = dict(actions or {})

    def extend(
        self,
        required: Optional[Mapping[str, RegistryEntry]] = None,
        rules: Optional[Mapping[str, RegistryEntry]] = None,
        actions: Optional[Mapping[str, RegistryEntry]] = None
    ) -> "RuleRegistry":
        """Return a copy of this registry with extra entries layered on top"""
        return RuleRegistry(
            required={**self.required, **(required or {})},
            rules={**self.rules, **(rules or {})},
            actions={**self.actions, **(actions or {})},
        )

    def bind(self, validator: "FileValidator") -> "BoundRegistry":
        """Resolve every entry to a callable owned by the given session"""
        return BoundRegistry(
            required=_bind_namespace(self.required, validator),
            rules=_bind_namespace(self.rules, validator),
            actions=_bind_namespace(self.actions, validator),
        )


class BoundRegistry:
    """Registry whose entries are ready to be called for one session"""

    def __init__(
        self,
        required: Dict[str, Callable[..., Any]],
        rules: Dict[str, Callable[..., Any]],
        actions: Dict[str, Callable[..., Any]]
    ):
        self.required = required
        self.rules = rules
        self.actions = actions


def _bind_namespace(
    namespace: Mapping[str, RegistryEntry],
    validator: "FileValidator"
) -> Dict[str, Callable[..., Any]]:
    bound: Dict[str, Callable[..., Any]] = {}

    for name, entry in namespace.items():
        if inspect.isclass(entry) and issubclass(entry, BaseRule):
            instance = entry(validator)
            # Entries registered by hand keep the name they were given
            instance.name = name
            bound[name] = instance
        elif callable(entry):
            bound[name] = entry
        else:
            raise RegistryException(f"Registry entry '{name}' is not callable: {entry!r}")

    return bound


def get_default_registry() -> RuleRegistry:
    """
    Get a registry holding every built-in rule and action.

    Importing the built-in vocabularies triggers their registration.
    """
    from modules.file_validation import rules  # noqa: F401
    from modules.file_validation import actions  # noqa: F401

    return RuleRegistry(
        required=REQUIRED_RULES,
        rules=VALIDATION_RULES,
        actions=ACTIONS,
    )
