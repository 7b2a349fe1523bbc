"""Gate generation behind a selection validation check."""

import asyncio
import logging
from typing import Optional

from ..config import settings
from ..cube.models import DataTable
from .evaluator import ExpressionEvaluator, interpret_result, normalize_value
from .expressions import expected_selection, extract_all_fields, extract_field_name
from .models import (
    ValidationConfig,
    ValidationDetail,
    ValidationMode,
    ValidationResult,
)

logger = logging.getLogger(__name__)

PASSED_MESSAGE = "Selection validation passed"
SETUP_MESSAGE = "Please enable custom selection validation and configure validation rules"
EXPRESSION_HINT = (
    "Use format like GetSelectedCount(FieldName)=1 or GetPossibleCount([FieldName])=1"
)


class SelectionValidator:
    """
    Decide whether generation may proceed.

    The mode is derived from the configuration on every call:
      basic                - custom validation disabled, always invalid
      custom_expression    - the expression is evaluated by the engine
      hypercube_validation - the table is inspected directly; used when
                             configured, and whenever evaluation fails
    No state is kept between calls.
    """

    def __init__(
        self,
        evaluator: Optional[ExpressionEvaluator] = None,
        timeout: Optional[float] = None,
        default_message: Optional[str] = None,
    ):
        """
        Initialize the validator.

        Args:
            evaluator: Expression evaluator (hypercube fallback when None)
            timeout: Seconds to wait for the evaluator (no limit when None)
            default_message: Message for failed checks without a custom one
        """
        self.evaluator = evaluator
        self.timeout = timeout
        self.default_message = default_message or settings.default_validation_message

    def _failure_message(self, config: ValidationConfig) -> str:
        return config.custom_validation_message or self.default_message

    async def validate(self, table: DataTable, config: ValidationConfig) -> ValidationResult:
        """
        Validate the current selection.

        Never raises on evaluator problems; those fall back to table
        inspection.

        Args:
            table: Current data table
            config: Validation settings

        Returns:
            ValidationResult
        """
        if not config.enable_custom_validation:
            return self.validate_basic()

        if not (config.custom_validation_expression or "").strip():
            return ValidationResult(
                valid=False,
                message="Custom validation expression not configured",
                mode=ValidationMode.CUSTOM_EXPRESSION,
            )

        if config.use_hypercube_validation or self.evaluator is None:
            return self.validate_hypercube(table, config)

        return await self._validate_custom_expression(table, config)

    def validate_basic(self) -> ValidationResult:
        """Result used while custom validation is disabled."""
        return ValidationResult(
            valid=False,
            message=SETUP_MESSAGE,
            mode=ValidationMode.BASIC,
            requires_validation_setup=True,
        )

    async def _evaluate(self, expression: str):
        if self.timeout is None:
            return await self.evaluator.evaluate(expression)
        return await asyncio.wait_for(self.evaluator.evaluate(expression), timeout=self.timeout)

    async def _validate_custom_expression(
        self, table: DataTable, config: ValidationConfig
    ) -> ValidationResult:
        expression = config.custom_validation_expression

        try:
            result = await self._evaluate(expression)
        except asyncio.TimeoutError:
            logger.warning(
                f"Evaluation of '{expression}' timed out, falling back to hypercube validation"
            )
            return self.validate_hypercube(table, config)
        except Exception as e:
            logger.warning(
                f"Evaluation of '{expression}' failed ({e}), "
                "falling back to hypercube validation"
            )
            return self.validate_hypercube(table, config)

        is_valid = interpret_result(expression, result)
        value = normalize_value(result)
        all_fields = extract_all_fields(expression)
        logger.debug(f"Expression '{expression}' evaluated to {value!r}: valid={is_valid}")

        return ValidationResult(
            valid=is_valid,
            message=PASSED_MESSAGE if is_valid else self._failure_message(config),
            mode=ValidationMode.CUSTOM_EXPRESSION,
            details=[
                ValidationDetail(
                    label="Custom Expression",
                    valid=is_valid,
                    message=(
                        f"Expression result: {value} (Valid)"
                        if is_valid
                        else f"Expression result: {value} (Invalid)"
                    ),
                    expression=expression,
                    result=value,
                    field_name=all_fields[0] if all_fields else None,
                    all_fields=all_fields,
                    suggestion=(
                        f"Make selections in: {', '.join(all_fields)}"
                        if not is_valid and all_fields
                        else None
                    ),
                )
            ],
        )

    def validate_hypercube(self, table: DataTable, config: ValidationConfig) -> ValidationResult:
        """
        Validate by counting distinct values of the expression's field.

        Args:
            table: Current data table
            config: Validation settings

        Returns:
            ValidationResult in hypercube_validation mode
        """
        expression = config.custom_validation_expression or ""
        field_name = extract_field_name(expression)

        if not field_name:
            return ValidationResult(
                valid=False,
                message="Could not extract field name from expression",
                mode=ValidationMode.HYPERCUBE_VALIDATION,
                details=[
                    ValidationDetail(
                        label="Expression Analysis",
                        valid=False,
                        message=f"Unable to parse field name from: {expression}",
                        expression=expression,
                        suggestion=EXPRESSION_HINT,
                    )
                ],
            )

        index = table.find_dimension(field_name)
        if index is None:
            available = ", ".join(d.title for d in table.dimensions)
            return ValidationResult(
                valid=False,
                message=f"Please add '{field_name}' as a dimension and make a selection",
                mode=ValidationMode.HYPERCUBE_VALIDATION,
                details=[
                    ValidationDetail(
                        label="Missing Dimension",
                        valid=False,
                        message=f"Field '{field_name}' not found. Available: {available}",
                        field_name=field_name,
                        expression=expression,
                        suggestion=(
                            f"Add '{field_name}' as a dimension to the extension, "
                            "or check your expression spelling"
                        ),
                    )
                ],
            )

        values = table.distinct_values(index)
        expectation = expected_selection(expression)
        is_valid = expectation.accepts(len(values))

        if table.is_empty:
            detail_message = f"No data available for {field_name}"
        elif is_valid:
            detail_message = f"Valid: {len(values)} value(s) selected from {field_name}"
        else:
            detail_message = (
                f"Invalid: {len(values)} values found in {field_name}, "
                f"expected {expectation.value}"
            )

        return ValidationResult(
            valid=is_valid,
            message=PASSED_MESSAGE if is_valid else self._failure_message(config),
            mode=ValidationMode.HYPERCUBE_VALIDATION,
            details=[
                ValidationDetail(
                    label=f"{field_name} Selection",
                    valid=is_valid,
                    message=detail_message,
                    field_name=field_name,
                    result=len(values),
                    values=values[:3],
                    expression=expression,
                )
            ],
        )


async def validate_selection(
    table: DataTable,
    config: ValidationConfig,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> ValidationResult:
    """Validate the current selection against a configuration."""
    return await SelectionValidator(evaluator=evaluator).validate(table, config)


def describe_selection(table: DataTable, result: ValidationResult) -> str:
    """
    Short summary of the validated selection, e.g. "Customer: Acme".

    Returns "" when the result is invalid or names no known field.
    """
    if not result.valid or table.is_empty or not result.details:
        return ""

    field_name = result.details[0].field_name
    if not field_name:
        return ""

    index = table.find_dimension(field_name)
    if index is None:
        return ""

    value = table.rows[0][index].display_value
    return f"{field_name}: {value}" if value else ""
