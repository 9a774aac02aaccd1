from __future__ import annotations

import re
import shutil
from pathlib import Path

from specdev.errors import PreconditionMissing
from specdev.stages import INTAKE_FILENAME

PROJECT_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_project_name(name: str) -> str | None:
    """Return an error message for an unusable project name, or None."""
    if not name:
        return "Project name cannot be empty"
    if not PROJECT_NAME.match(name):
        return "Project name must contain only letters, numbers, hyphens, and underscores"
    return None


def create_project(
    project_dir: Path,
    templates_root: Path,
    specs_dirname: str = "specs",
    intake_filename: str = INTAKE_FILENAME,
) -> Path:
    """Create ``<project>/specs`` and copy the blank requirements form into it.

    An existing form is overwritten; callers confirm that with the user first.
    """
    template = templates_root / INTAKE_FILENAME
    if not template.is_file():
        raise PreconditionMissing(
            f"Requirements form template not found: {template}",
            ["Please ensure the spec-dev tool is properly installed with all template files."],
        )
    specs_dir = project_dir / specs_dirname
    specs_dir.mkdir(parents=True, exist_ok=True)
    form_path = specs_dir / intake_filename
    shutil.copyfile(template, form_path)
    print(f"[scaffold] Requirements form: {form_path}")
    return form_path
