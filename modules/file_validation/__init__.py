"""
File validation module.

Validates uploaded-file metadata and other named field values against
declarative rules, then runs post-validation actions on the files.

Main components:
- FileValidator: Validation session (entry point)
- RuleRegistry: Required-determiners, validators and actions by name
- Built-in rules and actions: required, file, mimes, max, move, delete, ...

Usage:
    from modules.file_validation import FileValidator

    validator = FileValidator(ctx, fields, {"avatar": "required|image|max:2048"})

    if not await validator.validate():
        for error in ctx.validation_errors:
            print(error)
"""

__version__ = "1.0.0"

from modules.file_validation.engine import FileValidator
from modules.file_validation.core.base import UNDEFINED, ErrorType, FieldError, FieldPlan
from modules.file_validation.core.registry import (
    RuleRegistry,
    get_default_registry,
    register_action,
    register_required_rule,
    register_rule,
)

__all__ = [
    'FileValidator',
    'UNDEFINED',
    'ErrorType',
    'FieldError',
    'FieldPlan',
    'RuleRegistry',
    'get_default_registry',
    'register_action',
    'register_required_rule',
    'register_rule',
]
