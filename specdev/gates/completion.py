from __future__ import annotations

import re
from typing import Optional

from specdev.stages import REQUIRED_FIELD

_COMMENT = re.compile(r"<!--.*?-->", flags=re.DOTALL)


def _field_label(field: str) -> re.Pattern:
    return re.compile(rf"^\*\*{re.escape(field)}:\*\*(.*)$")


def field_value(form_text: str, field: str = REQUIRED_FIELD) -> Optional[str]:
    """Return the cleaned value of a labelled form field, or None when the label is missing.

    The value is the text after the label on the same line, or the line
    that follows it. HTML comment placeholders are removed.
    """
    lines = form_text.splitlines()
    label = _field_label(field)
    for index, line in enumerate(lines):
        match = label.match(line)
        if not match:
            continue
        inline = _COMMENT.sub("", match.group(1)).strip()
        if inline:
            return inline
        if index + 1 >= len(lines):
            return ""
        return _COMMENT.sub("", lines[index + 1]).strip()
    return None


def is_intake_complete(form_text: str, field: str = REQUIRED_FIELD) -> bool:
    value = field_value(form_text, field)
    # an unterminated comment means a multi-line placeholder
    return bool(value) and not value.startswith("<!--")
