"""Placeholder syntax definitions and patterns."""

import re
from typing import Pattern

# {{field_name}} - two open braces, one or more non-close-brace characters, two close braces
PLACEHOLDER_PATTERN: Pattern = re.compile(r"\{\{([^}]+)\}\}")


def placeholder_variants(field_name: str) -> list[str]:
    """
    Textual variants a field can be referenced by in prompt text.

    Double-brace forms come first so that "{{x}}" is consumed whole
    before "{x}" can match inside it.

    Args:
        field_name: Lower-cased field name

    Returns:
        Variants in replacement order
    """
    upper = field_name.upper()
    return [
        f"{{{{{field_name}}}}}",
        f"{{{{{upper}}}}}",
        f"{{{field_name}}}",
        f"{{{upper}}}",
    ]

