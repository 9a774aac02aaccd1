from __future__ import annotations

from pathlib import Path
from typing import Optional

from specdev.errors import MissingPlaceholder, PreconditionMissing
from specdev.utils.io import read_text


def compose(
    template: str,
    upstream: Optional[str],
    marker: Optional[str],
    template_name: str = "template",
) -> str:
    """Replace the single line holding ``marker`` with the upstream document.

    Every other line of the template is kept byte for byte. Without an
    upstream document (the intake form) the text passes through unchanged.
    """
    if upstream is None or marker is None:
        return template

    count = template.count(marker)
    if count != 1:
        raise MissingPlaceholder(template_name, marker, count)

    lines = template.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if marker not in line:
            continue
        body = line.rstrip("\r\n")
        ending = line[len(body) :]
        replacement = upstream
        if ending and not upstream.endswith(("\n", "\r")):
            replacement += ending
        lines[index] = replacement
        break
    return "".join(lines)


def load_template(path: Path, command: str) -> str:
    if not path.is_file():
        raise PreconditionMissing(
            f"Prompt template not found: {path}",
            [
                f"The '{command}' command needs this template.",
                "Please ensure the spec-dev tool is properly installed with all template files,",
                "or point --templates-dir at a directory that contains it.",
            ],
        )
    return read_text(path)
