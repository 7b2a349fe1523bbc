"""Selection validation gating prompt generation."""

from .models import (
    EvaluationKind,
    EvaluationResult,
    EvaluatorUnavailableError,
    ValidationConfig,
    ValidationDetail,
    ValidationMode,
    ValidationResult,
)
from .evaluator import (
    ExpressionEvaluator,
    HttpExpressionEvaluator,
    UnavailableEvaluator,
    interpret_result,
)
from .expressions import extract_all_fields, extract_field_name, expected_selection
from .validator import SelectionValidator, validate_selection, describe_selection

__all__ = [
    "EvaluationKind",
    "EvaluationResult",
    "EvaluatorUnavailableError",
    "ValidationConfig",
    "ValidationDetail",
    "ValidationMode",
    "ValidationResult",
    "ExpressionEvaluator",
    "HttpExpressionEvaluator",
    "UnavailableEvaluator",
    "interpret_result",
    "extract_all_fields",
    "extract_field_name",
    "expected_selection",
    "SelectionValidator",
    "validate_selection",
    "describe_selection",
]
