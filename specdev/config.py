from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from specdev.stages import INTAKE_FILENAME

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
BACKEND_KINDS = ("command", "mock", "openai", "gemini")
DEFAULT_COMMAND = "aichat -f {prompt}"
DEFAULT_MIN_WORDS = 100


@dataclass(frozen=True)
class PipelineConfig:
    project_root: Path
    templates_root: Path = PACKAGE_TEMPLATES_DIR
    specs_dirname: str = "specs"
    intake_filename: str = INTAKE_FILENAME
    backend: str = "command"
    command: str = DEFAULT_COMMAND
    timeout: Optional[float] = None
    min_words: int = DEFAULT_MIN_WORDS
    openai_model: str = "gpt-4o-mini"
    gemini_model: str = "gemini-flash-latest"
    max_output_tokens: Optional[int] = None

    @property
    def specs_dir(self) -> Path:
        return self.project_root / self.specs_dirname

    @property
    def intake_path(self) -> Path:
        return self.specs_dir / self.intake_filename

    def template_path(self, name: str) -> Path:
        return self.templates_root / name

    @classmethod
    def from_env(
        cls,
        project_root: Path,
        templates_root: Optional[Path] = None,
        backend: Optional[str] = None,
    ) -> "PipelineConfig":
        load_dotenv(project_root / ".env")
        kind = backend or os.getenv("SPECDEV_BACKEND", "command")
        if kind not in BACKEND_KINDS:
            raise ValueError(
                f"SPECDEV_BACKEND must be one of {', '.join(BACKEND_KINDS)}; got {kind!r}"
            )
        command = os.getenv("SPECDEV_COMMAND", DEFAULT_COMMAND)
        if kind == "command":
            _check_command(command)
        return cls(
            project_root=project_root,
            templates_root=templates_root or PACKAGE_TEMPLATES_DIR,
            backend=kind,
            command=command,
            timeout=_env_number("SPECDEV_TIMEOUT", float),
            min_words=_env_number("SPECDEV_MIN_WORDS", int) or DEFAULT_MIN_WORDS,
            openai_model=os.getenv("SPECDEV_OPENAI_MODEL", "gpt-4o-mini"),
            gemini_model=os.getenv("SPECDEV_GEMINI_MODEL", "gemini-flash-latest"),
            max_output_tokens=_env_number("SPECDEV_MAX_OUTPUT_TOKENS", int),
        )


def _env_number(name: str, kind: type):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number; got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive; got {raw!r}")
    return value


def _check_command(command: str) -> None:
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise ValueError(f"SPECDEV_COMMAND cannot be parsed ({exc}); got {command!r}") from exc
    if not argv:
        raise ValueError("SPECDEV_COMMAND is empty")
