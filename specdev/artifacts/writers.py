from __future__ import annotations

from datetime import datetime
from pathlib import Path

from specdev.utils.io import create_text
from specdev.utils.time import artifact_timestamp


def write_artifact(specs_dir: Path, prefix: str, content: str, moment: datetime) -> Path:
    """Persist a new ``<prefix>_<YYYYMMDD_HHMMSS>.md`` artifact; existing files are never touched."""
    stem = f"{prefix}_{artifact_timestamp(moment)}"
    path = specs_dir / f"{stem}.md"
    suffix = 1
    while True:
        try:
            create_text(path, content)
            return path
        except FileExistsError:
            suffix += 1
            path = specs_dir / f"{stem}_{suffix}.md"
