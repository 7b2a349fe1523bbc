"""Scanner for extracting placeholders from prompt text."""

import logging

from .models import Placeholder, PromptSource
from .syntax import PLACEHOLDER_PATTERN

logger = logging.getLogger(__name__)


class PlaceholderScanner:
    """Find {{name}} placeholders in system and user prompts."""

    def detect(self, system_prompt: str, user_prompt: str) -> list[Placeholder]:
        """
        Extract all placeholders from a pair of prompts.

        The prompts are scanned as one text, "<system> <user>". A placeholder
        is attributed to the system prompt when its offset falls within the
        system prompt's length. Repeated tokens are reported once per
        occurrence.

        Args:
            system_prompt: System prompt text (may be empty)
            user_prompt: User prompt text (may be empty)

        Returns:
            Placeholders in order of first occurrence
        """
        system_prompt = system_prompt or ""
        user_prompt = user_prompt or ""
        combined = f"{system_prompt} {user_prompt}"

        placeholders = []
        for match in PLACEHOLDER_PATTERN.finditer(combined):
            position = match.start()
            source = PromptSource.SYSTEM if position < len(system_prompt) else PromptSource.USER
            placeholders.append(
                Placeholder(
                    raw=match.group(0),
                    field_name=match.group(1).strip(),
                    position=position,
                    source=source,
                )
            )
            logger.debug(f"Found placeholder: {match.group(0)} at {position} ({source.value})")

        return placeholders


def detect_placeholders(system_prompt: str, user_prompt: str) -> list[Placeholder]:
    """Detect placeholders in a system/user prompt pair."""
    return PlaceholderScanner().detect(system_prompt, user_prompt)
