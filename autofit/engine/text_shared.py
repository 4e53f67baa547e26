"""Text preparation shared by the editor preview and the batch renderer.

Both paths must feed the measurement oracle exactly the string that will be
drawn, so placeholder substitution and case transforms happen here and
nowhere else.
"""

import re
from typing import Mapping, Optional, Union

from autofit.dsl.schema import TextTransform

DYNAMIC_FIELD_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
# ASCII word boundaries, matching the canvas renderer's capitalize
WORD_START_PATTERN = re.compile(r"\b\w", re.ASCII)


def replace_dynamic_fields(
    text: str,
    row_data: Mapping[str, str],
    field_mapping: Optional[Mapping[str, str]] = None,
) -> str:
    """Fill ``{{field}}`` placeholders from a data row.

    Each placeholder is looked up through ``field_mapping`` first (template
    field -> data column), then directly by name. Placeholders with no value
    are removed.

    Args:
        text: Template text.
        row_data: One data row, column name -> value.
        field_mapping: Optional template field -> column name mapping.

    Returns:
        Text with every placeholder replaced.
    """
    if not text:
        return ""

    field_mapping = field_mapping or {}

    def _lookup(match: re.Match) -> str:
        field_name = match.group(1).strip()
        column = field_mapping.get(field_name)
        value = row_data.get(column) if column else None
        if not value:
            value = row_data.get(field_name)
        return value if value is not None else ""

    return DYNAMIC_FIELD_PATTERN.sub(_lookup, text)


def apply_text_transform(
    text: str,
    transform: Union[TextTransform, str, None],
) -> str:
    """Apply a case transform to text."""
    if not text or not transform:
        return text

    transform = TextTransform(transform)
    if transform == TextTransform.UPPERCASE:
        return text.upper()
    if transform == TextTransform.LOWERCASE:
        return text.lower()
    if transform == TextTransform.CAPITALIZE:
        return WORD_START_PATTERN.sub(lambda m: m.group(0).upper(), text)
    return text
