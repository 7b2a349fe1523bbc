"""Data models for selection validation."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ValidationMode(str, Enum):
    """How a validation result was obtained."""

    CUSTOM_EXPRESSION = "custom_expression"  # Evaluated by the expression engine
    HYPERCUBE_VALIDATION = "hypercube_validation"  # Inspected table contents directly
    BASIC = "basic"  # Validation not configured


class EvaluationKind(str, Enum):
    """Tag of an expression evaluation result."""

    NUMERIC = "numeric"
    TEXT = "text"
    ABSENT = "absent"


class EvaluationResult(BaseModel):
    """Result of evaluating an expression: a number, a text, or nothing."""

    kind: EvaluationKind = EvaluationKind.ABSENT
    value: Optional[Union[float, str]] = None

    @classmethod
    def numeric(cls, value: float) -> "EvaluationResult":
        return cls(kind=EvaluationKind.NUMERIC, value=float(value))

    @classmethod
    def text(cls, value: str) -> "EvaluationResult":
        return cls(kind=EvaluationKind.TEXT, value=str(value))

    @classmethod
    def absent(cls) -> "EvaluationResult":
        return cls()

    @classmethod
    def from_raw(cls, raw: Any) -> "EvaluationResult":
        """
        Normalize a loosely typed evaluator payload.

        Accepts a number, a string, None, or a dict carrying
        numericValue/textValue (or the host's qNum/qText). A numeric value
        wins over text.
        """
        if raw is None:
            return cls.absent()
        if isinstance(raw, bool):
            return cls.numeric(-1 if raw else 0)
        if isinstance(raw, (int, float)):
            return cls.numeric(raw)
        if isinstance(raw, str):
            return cls.text(raw)
        if isinstance(raw, dict):
            number = raw.get("numericValue", raw.get("qNum"))
            if isinstance(number, (int, float)) and not isinstance(number, bool):
                return cls.numeric(number)
            text = raw.get("textValue", raw.get("qText"))
            if text is not None:
                return cls.text(text)
        return cls.absent()


class ValidationConfig(BaseModel):
    """Selection validation settings of one widget."""

    enable_custom_validation: bool = False
    custom_validation_expression: str = ""
    custom_validation_message: Optional[str] = None
    use_hypercube_validation: bool = False  # Skip the evaluator entirely


class ValidationDetail(BaseModel):
    """One check contributing to a validation result."""

    label: str
    valid: bool
    message: str
    field_name: Optional[str] = None
    result: Optional[Any] = None  # Expression result or distinct-value count
    values: Optional[list[str]] = None  # Sample of values found
    expression: Optional[str] = None
    all_fields: list[str] = Field(default_factory=list)
    suggestion: Optional[str] = None


class ValidationResult(BaseModel):
    """Whether generation may proceed, and why."""

    valid: bool
    message: str
    mode: ValidationMode
    details: list[ValidationDetail] = Field(default_factory=list)
    requires_validation_setup: bool = False


class EvaluatorUnavailableError(Exception):
    """Exception raised when no expression evaluator can be reached."""

    pass
