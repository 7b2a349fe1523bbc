"""Placeholder detection and prompt rendering.

This module finds {{field_name}} tokens in system and user prompts and
renders prompts by substituting mapped fields with live data values.
"""

from .models import Placeholder, PromptSource
from .scanner import PlaceholderScanner, detect_placeholders
from .renderer import TemplateRenderer, render_template

__all__ = [
    "Placeholder",
    "PromptSource",
    "PlaceholderScanner",
    "detect_placeholders",
    "TemplateRenderer",
    "render_template",
]
