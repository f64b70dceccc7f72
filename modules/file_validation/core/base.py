"""
Base classes and data models for the file validation system.

This module provides the foundation shared by the plan builder, the
evaluator and every registry entry:
- UNDEFINED: Sentinel for values that are absent from the field data
- RuleSpec / ActionSpec: Normalized rule and action invocations
- FieldPlan: Per-field execution plan
- FieldError: Recorded validation error
- BaseRequiredRule / BaseValidationRule / BaseAction: Registry entry bases
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, field as dataclass_field
from enum import Enum

if TYPE_CHECKING:
    from modules.file_validation.engine import FileValidator
    from modules.file_validation.storage.backend import StorageBackend


class _Undefined:
    """Marker for a value that does not exist in the field data."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


# An absent value. ``None`` is a defined (null) value.
UNDEFINED = _Undefined()


class ErrorType(str, Enum):
    """Origin of a recorded validation error"""
    RULE = "rule"
    ACTION = "action"


@dataclass(frozen=True)
class RuleSpec:
    """A single parsed rule invocation for a field."""
    rule: str
    args: Any = None
    message: Optional[str] = None


@dataclass(frozen=True)
class ActionSpec:
    """A single parsed action invocation for a field."""
    action: str
    args: Any = None
    callback: Optional[Callable[[], Awaitable[Any]]] = None


@dataclass
class FieldPlan:
    """
    Normalized execution plan for one field.

    ``rules`` holds required-determiners first, then every other rule,
    each group in declaration order. ``value`` is the snapshot taken when
    the plan was built.
    """
    field: str
    value: Any = UNDEFINED
    required: bool = False
    rules: List[RuleSpec] = dataclass_field(default_factory=list)
    actions: List[ActionSpec] = dataclass_field(default_factory=list)
    delete_on_fail: bool = False


@dataclass
class FieldError:
    """A validation error recorded against a field."""
    field: str
    type: ErrorType
    name: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``{field: {type, rule|action, message}}`` entry shape"""
        detail: Dict[str, Any] = {
            'type': self.type.value,
            'message': self.message,
        }
        if self.type == ErrorType.ACTION:
            detail['action'] = self.name
        else:
            detail['rule'] = self.name
        return {self.field: detail}


def is_present(value: Any) -> bool:
    """Return True when a value counts as supplied (not absent, null or empty)."""
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return False
    return True


def is_uploaded_file(value: Any) -> bool:
    """Return True when a value looks like uploaded-file metadata."""
    return isinstance(value, dict) and bool(value.get('path'))


class BaseRule(ABC):
    """
    Abstract base class for every registry entry.

    Entries are instantiated once per validation session with the session
    itself, which gives them access to error recording and storage.
    """

    #: Registry name, set by the registration decorators
    name: str = ""

    #: Error type used by add_error()
    error_type: ErrorType = ErrorType.RULE

    def __init__(self, validator: "FileValidator"):
        self.validator = validator

    @property
    def storage(self) -> "StorageBackend":
        return self.validator.storage

    @property
    def fields(self) -> Any:
        return self.validator.fields

    def add_error(self, field: str, message: str) -> None:
        """Record an error for this entry on the owning session"""
        self.validator.add_error(field, self.error_type, self.name, message)

    @staticmethod
    def format_message(template: str, field: str, **params: Any) -> str:
        """
        Fill a default message template.

        ``:attribute`` is replaced with the field name and ``:<param>`` with
        each keyword parameter.
        """
        message = template.replace(':attribute', field)
        for key, param in params.items():
            message = message.replace(f':{key}', str(param))
        return message


class BaseRequiredRule(BaseRule):
    """
    Base class for required-determiners.

    A truthy result marks the field as required and lets evaluation
    continue; a falsy result halts the field without an engine error.
    """

    @abstractmethod
    async def __call__(
        self,
        field: str,
        value: Any,
        args: Any = None,
        message: Optional[str] = None
    ) -> bool:
        pass


class BaseValidationRule(BaseRule):
    """
    Base class for validators.

    Validators record their own error on failure and return False.

    Example:
        @register_rule("odd")
        class OddRule(BaseValidationRule):
            default_message = "The :attribute must be odd"

            async def check(self, field, value, args):
                return isinstance(value, int) and value % 2 == 1
    """

    default_message: str = "The :attribute is invalid"

    async def __call__(
        self,
        field: str,
        value: Any,
        delete_on_fail: bool = False,
        args: Any = None,
        message: Optional[str] = None
    ) -> bool:
        if await self.check(field, value, args):
            return True
        return await self.fail(field, value, delete_on_fail, message or self.default_for(field, args))

    @abstractmethod
    async def check(self, field: str, value: Any, args: Any) -> bool:
        """Return True when the value satisfies this rule."""
        pass

    def default_for(self, field: str, args: Any) -> str:
        """Build the fallback message when no template was configured"""
        return self.format_message(self.default_message, field, args=_join_args(args))

    async def fail(self, field: str, value: Any, delete_on_fail: bool, message: str) -> bool:
        """Record the failure and remove the uploaded file if requested"""
        self.add_error(field, message)

        if delete_on_fail and is_uploaded_file(value):
            await self.validator.discard_file(field, value)

        return False


class BaseAction(BaseRule):
    """
    Base class for post-validation actions.

    Actions record their own error on failure and return False.
    """

    error_type = ErrorType.ACTION

    @abstractmethod
    async def __call__(
        self,
        field: str,
        value: Any,
        delete_on_fail: bool,
        args: Any,
        callback: Optional[Callable[[], Awaitable[Any]]] = None
    ) -> bool:
        pass


def as_list(args: Any) -> List[Any]:
    """Normalize collapsed rule arguments back into a list."""
    if args is None:
        return []
    if isinstance(args, (list, tuple)):
        return list(args)
    return [args]


def _join_args(args: Any) -> str:
    return ", ".join(str(arg) for arg in as_list(args))
