"""Minimal placeholder templating for highlight blocks.

Supports exactly two constructs:

- ``{name}`` placeholders, replaced by ``values[name]``
- ``{#name}...{/name}`` sections, kept only when ``values[name]`` is non-empty

Unknown placeholders are left verbatim. Substitution is a single pass over the
template, so values containing brace text are never expanded again.
"""

import re
from typing import Mapping, Optional

SECTION_PATTERN = re.compile(r'\{#(\w+)\}(.*?)\{/\1\}', re.DOTALL)
PLACEHOLDER_PATTERN = re.compile(r'\{(\w+)\}')


def render_template(template: str, values: Mapping[str, Optional[str]]) -> str:
    """Render a template against a mapping of values.

    Args:
        template: Template text
        values: Placeholder values; None and "" count as absent for sections

    Returns:
        Rendered text

    Examples:
        >>> render_template("{text}{#note} - {note}{/note}", {"text": "a", "note": ""})
        'a'
        >>> render_template("{text}{#note} - {note}{/note}", {"text": "a", "note": "b"})
        'a - b'
    """
    def replace_section(match: re.Match) -> str:
        return match.group(2) if values.get(match.group(1)) else ''

    def replace_placeholder(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return values[name] or ''

    # Placeholders are substituted while walking the section-resolved template,
    # never inside already-substituted values.
    resolved = SECTION_PATTERN.sub(replace_section, template)
    return PLACEHOLDER_PATTERN.sub(replace_placeholder, resolved)
