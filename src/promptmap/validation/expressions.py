"""Parsing helpers for selection validation expressions."""

import re
from enum import Enum
from typing import Optional, Pattern

# GetSelectedCount(Field), GetPossibleCount([Field]) - selection count calls
COUNT_FUNCTION_PATTERN: Pattern = re.compile(
    r"Get(?:Selected|Possible)Count\s*\(\s*\[?([^\])\s]+)\]?\s*\)",
    re.IGNORECASE,
)


class SelectionExpectation(str, Enum):
    """How many distinct values a validated field may hold."""

    EXACTLY_ONE = "1"
    ONE_OR_MORE = "1 or more"

    def accepts(self, count: int) -> bool:
        if self is SelectionExpectation.ONE_OR_MORE:
            return count >= 1
        return count == 1


def extract_all_fields(expression: str) -> list[str]:
    """
    Extract every field named in a selection count call.

    Args:
        expression: Validation expression text

    Returns:
        Field names in order of appearance
    """
    if not expression:
        return []
    return [match.group(1).strip() for match in COUNT_FUNCTION_PATTERN.finditer(expression)]


def extract_field_name(expression: str) -> Optional[str]:
    """Field named by the first selection count call, if any."""
    fields = extract_all_fields(expression)
    return fields[0] if fields else None


def expected_selection(expression: str) -> SelectionExpectation:
    """
    Selection count an expression asks for.

    ">=1" and ">0" allow one or more values; "=1" and anything else
    require exactly one.
    """
    compact = re.sub(r"\s+", "", expression or "")
    if ">=1" in compact or ">0" in compact:
        return SelectionExpectation.ONE_OR_MORE
    return SelectionExpectation.EXACTLY_ONE
