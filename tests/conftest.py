"""Shared fixtures: isolated environment, project directories and fake backends."""

import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from specdev.adapters.backend_base import GenerationResult
from specdev.config import PACKAGE_TEMPLATES_DIR, PipelineConfig

ENV_VARS = (
    "SPECDEV_BACKEND",
    "SPECDEV_COMMAND",
    "SPECDEV_TIMEOUT",
    "SPECDEV_MIN_WORDS",
    "SPECDEV_OPENAI_MODEL",
    "SPECDEV_GEMINI_MODEL",
    "SPECDEV_MAX_OUTPUT_TOKENS",
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
)

COMPLETE_FORM = """# Project Requirements Form

## Project Overview

**Project Name:**
Recipe Box

**Project Description:**
<!-- Describe what the project does -->
"""

INCOMPLETE_FORM = """# Project Requirements Form

## Project Overview

**Project Name:**
<!-- Enter the name of your project -->

**Project Description:**
A place to keep recipes.
"""

LONG_DOCUMENT = "# Generated\n\n" + ("word " * 150).strip() + "\n"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    # load_dotenv writes into os.environ; give every test its own copy.
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def project(tmp_path) -> Path:
    root = tmp_path / "project"
    (root / "specs").mkdir(parents=True)
    return root


@pytest.fixture
def config(project) -> PipelineConfig:
    return PipelineConfig(project_root=project, templates_root=PACKAGE_TEMPLATES_DIR)


def write_form(project: Path, text: str = COMPLETE_FORM) -> Path:
    path = project / "specs" / "requirements_form.md"
    path.write_text(text, encoding="utf-8")
    return path


def write_artifact(project: Path, name: str, text: str, mtime_ns: int | None = None) -> Path:
    path = project / "specs" / name
    path.write_text(text, encoding="utf-8")
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


class FakeBackend:
    name = "fake"

    def __init__(self, stdout: str = LONG_DOCUMENT, stderr: str = "") -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.prompts = []

    def invoke(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        return GenerationResult(stdout=self.stdout, stderr=self.stderr)


class StepClock:
    def __init__(self, start: datetime = datetime(2026, 3, 14, 9, 26, 53)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        moment = self.current
        self.current += timedelta(seconds=1)
        return moment


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
