"""
Field evaluator.

Runs one FieldPlan: required-determiners, then validators, then actions.
Every registry call is awaited before the next one starts.
"""

import inspect
from typing import Any, Callable, Dict, TYPE_CHECKING

from modules.file_validation.core.base import ErrorType, FieldPlan, UNDEFINED
from shared.utils.logger import setup_logger, log_function_call

if TYPE_CHECKING:
    from modules.file_validation.engine import FileValidator

logger = setup_logger(__name__)


async def _invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _has_args(args: Any) -> bool:
    if args is None:
        return False
    if isinstance(args, (str, list, tuple, dict)) and len(args) == 0:
        return False
    return True


class FieldEvaluator:
    """
    Evaluates field plans against bound registries.

    Args:
        validator: Owning validation session (receives engine errors)
        required: Bound required-determiners
        rules: Bound validators
        actions: Bound actions
    """

    def __init__(
        self,
        validator: "FileValidator",
        required: Dict[str, Callable[..., Any]],
        rules: Dict[str, Callable[..., Any]],
        actions: Dict[str, Callable[..., Any]]
    ):
        self.validator = validator
        self.required = required
        self.rules = rules
        self.actions = actions

    async def evaluate(self, plan: FieldPlan) -> bool:
        """
        Evaluate one field.

        Args:
            plan: Field plan

        Returns:
            True if every rule and action ran to completion, False if the
            field halted early
        """
        if not await self._apply_rules(plan):
            return False

        return await self._apply_actions(plan)

    async def _apply_rules(self, plan: FieldPlan) -> bool:
        for spec in plan.rules:
            kwargs: Dict[str, Any] = {}
            if _has_args(spec.args):
                kwargs['args'] = spec.args
            if spec.message:
                kwargs['message'] = spec.message

            if spec.rule in self.required:
                log_function_call(logger, spec.rule, field=plan.field, **kwargs)
                try:
                    passed = await _invoke(self.required[spec.rule], plan.field, plan.value, **kwargs)
                except Exception as e:
                    self._record_exception(plan, ErrorType.RULE, spec.rule, e)
                    return False

                if not passed:
                    logger.debug(f"Field '{plan.field}' skipped by '{spec.rule}'")
                    return False

                plan.required = True

            elif spec.rule in self.rules:
                if not plan.required and plan.value is UNDEFINED:
                    logger.debug(f"Optional field '{plan.field}' is absent, skipping remaining rules")
                    return False

                log_function_call(logger, spec.rule, field=plan.field, **kwargs)
                try:
                    passed = await _invoke(
                        self.rules[spec.rule], plan.field, plan.value, plan.delete_on_fail, **kwargs
                    )
                except Exception as e:
                    self._record_exception(plan, ErrorType.RULE, spec.rule, e)
                    return False

                if not passed:
                    logger.debug(f"Field '{plan.field}' failed rule '{spec.rule}'")
                    return False

            else:
                logger.warning(f"Unknown validation rule '{spec.rule}' on field '{plan.field}'")
                self.validator.add_error(
                    plan.field,
                    ErrorType.RULE,
                    spec.rule,
                    f"Invalid Validation Rule: {spec.rule} does not exist"
                )
                return False

        return True

    async def _apply_actions(self, plan: FieldPlan) -> bool:
        for spec in plan.actions:
            if spec.action not in self.actions:
                logger.warning(f"Unknown action '{spec.action}' on field '{plan.field}'")
                self.validator.add_error(
                    plan.field,
                    ErrorType.ACTION,
                    spec.action,
                    f"Invalid action: {spec.action} does not exist"
                )
                return False

            if plan.value is UNDEFINED:
                logger.debug(f"Field '{plan.field}' is absent, skipping action '{spec.action}'")
                continue

            args = spec.args if spec.args is not None else []
            kwargs: Dict[str, Any] = {}
            if spec.callback is not None:
                kwargs['callback'] = spec.callback

            log_function_call(logger, spec.action, field=plan.field, args=args)
            try:
                done = await _invoke(
                    self.actions[spec.action], plan.field, plan.value, plan.delete_on_fail, args, **kwargs
                )
            except Exception as e:
                self._record_exception(plan, ErrorType.ACTION, spec.action, e)
                return False

            if not done:
                logger.debug(f"Action '{spec.action}' stopped field '{plan.field}'")
                return False

        return True

    def _record_exception(self, plan: FieldPlan, error_type: ErrorType, name: str, error: Exception) -> None:
        logger.error(
            f"{error_type.value.capitalize()} '{name}' raised on field '{plan.field}': {error}",
            exc_info=True
        )

        if error_type == ErrorType.ACTION:
            message = f"Action {name} failed: {error}"
        else:
            message = f"Validation rule {name} failed: {error}"

        self.validator.add_error(plan.field, error_type, name, message)
