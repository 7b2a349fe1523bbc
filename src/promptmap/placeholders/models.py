"""Data models for prompt placeholders."""

from enum import Enum

from pydantic import BaseModel


class PromptSource(str, Enum):
    """Which prompt a placeholder was found in."""

    SYSTEM = "system"
    USER = "user"


class Placeholder(BaseModel):
    """A {{name}} token detected in prompt text."""

    raw: str  # Full token, e.g. "{{Region}}"
    field_name: str  # Trimmed inner text, e.g. "Region"
    position: int  # Offset in the combined "system user" text
    source: PromptSource
