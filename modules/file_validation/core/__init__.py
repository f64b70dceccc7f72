"""
File validation core module.

Contains base classes, plan building, message resolution and the field
evaluator for the file validation system.
"""

from modules.file_validation.core.base import (
    UNDEFINED,
    ActionSpec,
    BaseAction,
    BaseRequiredRule,
    BaseRule,
    BaseValidationRule,
    ErrorType,
    FieldError,
    FieldPlan,
    RuleSpec,
)
from modules.file_validation.core.exceptions import (
    ConfigurationException,
    FileValidationException,
    RegistryException,
)
from modules.file_validation.core.messages import MessageResolver, render_value
from modules.file_validation.core.plan import PlanBuilder, parse_key
from modules.file_validation.core.evaluator import FieldEvaluator
from modules.file_validation.core.registry import (
    RuleRegistry,
    get_default_registry,
    register_action,
    register_required_rule,
    register_rule,
)

__all__ = [
    'UNDEFINED',
    'ActionSpec',
    'BaseAction',
    'BaseRequiredRule',
    'BaseRule',
    'BaseValidationRule',
    'ErrorType',
    'FieldError',
    'FieldPlan',
    'RuleSpec',
    'ConfigurationException',
    'FileValidationException',
    'RegistryException',
    'MessageResolver',
    'render_value',
    'PlanBuilder',
    'parse_key',
    'FieldEvaluator',
    'RuleRegistry',
    'get_default_registry',
    'register_action',
    'register_required_rule',
    'register_rule',
]
