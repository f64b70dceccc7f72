"""
FileValidator - Validation session for uploaded file metadata.

This is the primary entry point for validating a set of fields.
It builds the field plans once, drives one field evaluation after another,
and collects every error recorded along the way.
"""

import asyncio
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

from modules.file_validation.core.base import ErrorType, FieldError, FieldPlan
from modules.file_validation.core.config_loader import ValidationConfigLoader
from modules.file_validation.core.evaluator import FieldEvaluator
from modules.file_validation.core.messages import MessageResolver
from modules.file_validation.core.plan import PlanBuilder
from modules.file_validation.core.registry import RuleRegistry, get_default_registry
from modules.file_validation.storage.backend import StorageBackend, StorageError
from modules.file_validation.storage.registry import get_storage_backend
from shared.utils.logger import setup_logger, log_error

logger = setup_logger(__name__)

ERRORS_KEY = 'validation_errors'


class FileValidator:
    """
    Validation session.

    Orchestrates validation by:
    1. Building one plan per field from the rule and action specifications
    2. Evaluating each field in turn (rules, then actions)
    3. Collecting errors on the session and on the host context

    Usage:
        validator = FileValidator(
            ctx,
            {"avatar": {"name": "me.png", "path": "/tmp/up_1", "size": 5120, "type": "image/png"}},
            {"avatar": "required|image|max:2048"},
            delete_on_fail=True,
            messages={"avatar.max": ":attribute is too large"},
            actions={"avatar": {"action": "move", "args": ["avatars"]}},
        )

        if not await validator.validate():
            for error in ctx.validation_errors:
                print(error)
    """

    def __init__(
        self,
        context: Any,
        fields: Any,
        rules: Optional[Mapping[str, Any]] = None,
        delete_on_fail: bool = False,
        messages: Optional[Mapping[str, str]] = None,
        actions: Optional[Mapping[str, Any]] = None,
        registry: Optional[RuleRegistry] = None,
        storage: Optional[StorageBackend] = None,
        default_messages: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize validation session.

        Args:
            context: Host object receiving ``validation_errors``; attribute
                     for objects, key for mutable mappings
            fields: Field data (dot-path addressable)
            rules: Raw rule specification
            delete_on_fail: Passed through to validators and actions
            messages: Message table keyed by "field.rule" or "rule"
            actions: Raw action specification
            registry: Rule and action registries (defaults to built-ins)
            storage: Storage backend used by file rules and actions
                     (defaults to the configured backend)
            default_messages: Message table consulted after ``messages``
        """
        self.ctx = context
        self.fields = fields
        self.delete_on_fail = delete_on_fail
        self.registry = registry or get_default_registry()
        self.storage = storage or get_storage_backend()
        self.errors: List[FieldError] = []

        self._evaluated = False
        self._lock = asyncio.Lock()

        bound = self.registry.bind(self)
        self.evaluator = FieldEvaluator(self, bound.required, bound.rules, bound.actions)

        builder = PlanBuilder(bound.required.keys(), MessageResolver(default_messages))
        self.plans: Dict[str, FieldPlan] = builder.build(
            fields,
            rules=rules,
            delete_on_fail=delete_on_fail,
            messages=messages,
            actions=actions,
        )

    @classmethod
    def from_profile(
        cls,
        name: str,
        context: Any,
        fields: Any,
        config_loader: Optional[ValidationConfigLoader] = None,
        **kwargs: Any
    ) -> "FileValidator":
        """
        Build a session from a named validation profile.

        Args:
            name: Profile name in the validation config
            context: Host context object
            fields: Field data
            config_loader: Loader to read profiles from (defaults to the
                           configured profiles file)
            **kwargs: Overrides passed to the constructor (registry, storage, ...)

        Raises:
            ConfigurationException: If the profile is not defined
        """
        loader = config_loader or ValidationConfigLoader()
        profile = loader.get_profile(name)

        options = {
            'rules': profile['rules'],
            'delete_on_fail': profile['delete_on_fail'],
            'messages': profile['messages'],
            'actions': profile['actions'],
            'default_messages': loader.get_default_messages(),
        }
        options.update(kwargs)

        logger.info(f"Creating validation session from profile '{name}'")
        return cls(context, fields, **options)

    async def validate(self) -> bool:
        """
        Evaluate every field and return the verdict.

        Fields run one after another in plan order. The first call does the
        work; later calls, including ones made while the first is still
        running, wait for it and return the verdict without re-running any
        rule or action.

        Returns:
            True if no error has been recorded, False otherwise
        """
        async with self._lock:
            if not self._evaluated:
                logger.info(f"Validating {len(self.plans)} fields")

                try:
                    for plan in self.plans.values():
                        await self.evaluator.evaluate(plan)
                finally:
                    self._evaluated = True

                logger.info(
                    f"Validation finished: {'passed' if self.passed else 'failed'} "
                    f"({len(self.recorded_errors)} errors)"
                )

        return self.passed

    @property
    def passed(self) -> bool:
        """Verdict as of now: True while no error has been recorded"""
        return not self.errors and not self.recorded_errors

    @property
    def recorded_errors(self) -> List[Dict[str, Any]]:
        """
        Error entries on the host context.

        Includes entries appended there directly by registry callables.
        """
        if isinstance(self.ctx, Mapping):
            errors = self.ctx.get(ERRORS_KEY)
        else:
            errors = getattr(self.ctx, ERRORS_KEY, None)
        return list(errors or [])

    @property
    def evaluated(self) -> bool:
        """Whether validate() has already run the field plans"""
        return self._evaluated

    def add_error(self, field: str, type: ErrorType, name: str, message: str) -> None:
        """
        Record a validation error.

        Args:
            field: Field path
            type: Error origin (rule or action)
            name: Rule or action name
            message: Error message
        """
        error = FieldError(field=field, type=ErrorType(type), name=name, message=message)
        self.errors.append(error)
        self._context_errors().append(error.to_dict())

    def errors_for(self, field: str) -> List[FieldError]:
        """Get every error recorded for one field"""
        return [error for error in self.errors if error.field == field]

    async def discard_file(self, field: str, value: Mapping[str, Any]) -> bool:
        """
        Delete an uploaded file after a failed check.

        Storage failures are logged, never raised.

        Args:
            field: Field path (for logging)
            value: Uploaded-file metadata with a ``path``

        Returns:
            True if the file was deleted
        """
        path = value.get('path')

        try:
            deleted = await self.storage.delete(path)
        except StorageError as e:
            log_error(logger, e, f"Failed to delete uploaded file for '{field}'")
            return False

        if deleted:
            logger.info(f"Deleted uploaded file for '{field}': {path}")
        return deleted

    def _context_errors(self) -> List[Dict[str, Any]]:
        if isinstance(self.ctx, MutableMapping):
            if self.ctx.get(ERRORS_KEY) is None:
                self.ctx[ERRORS_KEY] = []
            return self.ctx[ERRORS_KEY]

        if getattr(self.ctx, ERRORS_KEY, None) is None:
            setattr(self.ctx, ERRORS_KEY, [])
        return getattr(self.ctx, ERRORS_KEY)
