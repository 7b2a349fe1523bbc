"""Expression evaluator interface and result interpretation."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

import httpx

from .models import EvaluationKind, EvaluationResult, EvaluatorUnavailableError

logger = logging.getLogger(__name__)


class ExpressionEvaluator(ABC):
    """Abstract base class for expression evaluators."""

    @abstractmethod
    async def evaluate(self, expression: str) -> EvaluationResult:
        """Evaluate an expression against the current selection state."""
        pass


class UnavailableEvaluator(ExpressionEvaluator):
    """Evaluator used when none is configured; always fails."""

    async def evaluate(self, expression: str) -> EvaluationResult:
        raise EvaluatorUnavailableError("No expression evaluator configured")


class HttpExpressionEvaluator(ExpressionEvaluator):
    """Evaluate expressions through an HTTP endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def evaluate(self, expression: str) -> EvaluationResult:
        """
        POST the expression and normalize the response.

        The endpoint receives {"expression": ...} and answers with
        {"numericValue": ..., "textValue": ...}.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url}/evaluate",
                json={"expression": expression},
            )
            response.raise_for_status()
            data = response.json()

        return EvaluationResult.from_raw(data)


def uses_boolean_convention(expression: str) -> bool:
    """
    True when the expression yields the engine's boolean (-1 true, 0 false).

    That is the case for selection count calls and for expressions joined
    with " and " / " or ".
    """
    if "GetSelectedCount" in expression or "GetPossibleCount" in expression:
        return True
    lowered = expression.lower()
    return " and " in lowered or " or " in lowered


def normalize_value(result: EvaluationResult) -> Optional[Union[float, str]]:
    """Numeric value of a result, parsing numeric-looking text."""
    if result.kind == EvaluationKind.NUMERIC:
        return float(result.value)
    if result.kind == EvaluationKind.TEXT:
        text = str(result.value).strip()
        try:
            return float(text)
        except ValueError:
            return result.value
    return None


def interpret_result(expression: str, result: EvaluationResult) -> bool:
    """
    Decide whether an evaluation result means "valid".

    Boolean-convention expressions are valid only at -1; simple
    expressions are valid at 1 (number or text). Text is parsed as a float
    and compared as is, not truncated to an integer: "1.0" is valid, "1.5"
    is not.

    Args:
        expression: The evaluated expression
        result: What the evaluator returned

    Returns:
        True if the selection is valid
    """
    value = normalize_value(result)
    if value is None or isinstance(value, str):
        return False
    if uses_boolean_convention(expression):
        return value == -1
    return value == 1
