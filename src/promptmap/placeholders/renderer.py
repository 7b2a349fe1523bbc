"""Substitute mapped fields into prompt text using live data values."""

import logging
from typing import TYPE_CHECKING, Optional

from ..config import settings
from ..cube.models import DataTable
from .syntax import placeholder_variants

if TYPE_CHECKING:
    from ..mapping.models import FieldMapping

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Render prompt templates against the current data table.

    Two strategies:
    - mapping-driven, when at least one mapping names a field: each mapped
      placeholder token is replaced by that field's values;
    - name heuristic, otherwise: every column title is tried as {title} or
      {{title}}, lower- or upper-cased. Double-brace forms are replaced
      first, so "{{region}}" renders as "East, West" and never as
      "{East, West}".

    A placeholder whose field has no data is left as-is. Rendering never
    raises on missing or mismatched data.
    """

    def __init__(self, max_values: Optional[int] = None, max_context_rows: Optional[int] = None):
        self.max_values = max_values if max_values is not None else settings.max_render_values
        self.max_context_rows = (
            max_context_rows if max_context_rows is not None else settings.max_context_rows
        )

    def field_value(self, table: DataTable, field_name: str) -> str:
        """
        Values of one field formatted for prompt text.

        Dimensions give their first distinct non-empty values, measures their
        first numeric values (non-numeric cells count as 0).

        Args:
            table: Current data table
            field_name: Dimension or measure title

        Returns:
            Comma-separated values, or "" if the field is unknown or empty
        """
        index = table.find_dimension(field_name)
        if index is not None:
            return table.dimension_summary(index, self.max_values)

        index = table.find_measure(field_name)
        if index is not None:
            return table.measure_summary(index, self.max_values)

        return ""

    def render(self, prompt_text: str, mappings: list["FieldMapping"], table: DataTable) -> str:
        """
        Render a prompt template.

        Args:
            prompt_text: Prompt containing placeholders
            mappings: Current mapping list
            table: Current data table

        Returns:
            Prompt text with resolvable placeholders substituted
        """
        if not prompt_text:
            return prompt_text or ""

        mapped = [m for m in mappings if m.mapped_field is not None]
        if mapped:
            return self._render_mapped(prompt_text, mapped, table)
        return self._render_by_name(prompt_text, table)

    def _render_mapped(
        self, prompt_text: str, mappings: list["FieldMapping"], table: DataTable
    ) -> str:
        rendered = prompt_text
        for mapping in mappings:
            value = self.field_value(table, mapping.mapped_field)
            if not value:
                logger.debug(f"No data for {mapping.placeholder} -> {mapping.mapped_field}")
                continue
            rendered = rendered.replace(mapping.placeholder, value)
        return rendered

    def _render_by_name(self, prompt_text: str, table: DataTable) -> str:
        if table.is_empty:
            return prompt_text

        values: dict[str, str] = {}
        for title in table.column_titles:
            key = title.lower()
            if key not in values:
                values[key] = self.field_value(table, title)

        rendered = prompt_text
        for key, value in values.items():
            if not value:
                continue
            for variant in placeholder_variants(key):
                rendered = rendered.replace(variant, value)
        return rendered

    def compose_prompt(
        self,
        system_prompt: str,
        user_prompt: str,
        mappings: list["FieldMapping"],
        table: DataTable,
    ) -> str:
        """
        Build the full prompt sent for generation.

        Renders both prompts, joins them with a blank line and appends a
        "Data Context" block with the column titles and leading rows.

        Args:
            system_prompt: System prompt template
            user_prompt: User prompt template
            mappings: Current mapping list
            table: Current data table

        Returns:
            The composed prompt text
        """
        system_text = self.render(system_prompt or "", mappings, table)
        user_text = self.render(user_prompt or "", mappings, table)

        prompt = f"{system_text}\n\n{user_text}" if system_text else user_text

        if not table.is_empty:
            prompt += "\n\nData Context:\n"
            titles = table.column_titles
            if titles:
                prompt += ", ".join(titles) + "\n"
            for row in table.rows[: self.max_context_rows]:
                prompt += ", ".join(cell.display_value for cell in row) + "\n"
            if len(table.rows) > self.max_context_rows:
                prompt += f"... and {len(table.rows) - self.max_context_rows} more rows\n"

        return prompt


def render_template(prompt_text: str, mappings: list["FieldMapping"], table: DataTable) -> str:
    """Render a prompt template against a data table."""
    return TemplateRenderer().render(prompt_text, mappings, table)
