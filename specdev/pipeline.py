from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Tuple

from specdev.adapters.backend_base import GenerationBackend
from specdev.adapters.gemini_adapter import GeminiBackend
from specdev.adapters.mock_adapter import MockBackend
from specdev.adapters.openai_adapter import OpenAIBackend
from specdev.adapters.subprocess_adapter import SubprocessBackend
from specdev.artifacts.repository import Artifact, ArtifactRepository
from specdev.artifacts.writers import write_artifact
from specdev.config import PipelineConfig
from specdev.errors import BackendError, IntakeIncomplete, OutputTooShort, PreconditionMissing
from specdev.gates.completion import is_intake_complete
from specdev.gates.parsers import normalize
from specdev.prompts.composer import compose, load_template
from specdev.stages import REQUIRED_FIELD, Stage
from specdev.utils.time import local_now

PREVIEW_LINES = 10


@dataclass
class StageReport:
    stage: Stage
    artifact: Path
    upstream: Path
    word_count: int
    line_count: int
    stripped_fence: bool = False
    preview: List[str] = field(default_factory=list)
    warnings: List[OutputTooShort] = field(default_factory=list)


def backend_for(config: PipelineConfig) -> GenerationBackend:
    if config.backend == "mock":
        return MockBackend()
    if config.backend == "openai":
        return OpenAIBackend(
            model=config.openai_model,
            max_output_tokens=config.max_output_tokens,
            timeout=config.timeout,
        )
    if config.backend == "gemini":
        return GeminiBackend(
            model=config.gemini_model,
            max_output_tokens=config.max_output_tokens,
            timeout=config.timeout,
        )
    return SubprocessBackend(config.command, timeout=config.timeout)


class Orchestrator:
    def __init__(
        self,
        config: PipelineConfig,
        backend: GenerationBackend,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.config = config
        self.backend = backend
        self.clock = clock
        self.repository = ArtifactRepository(config.specs_dir, config.intake_filename)

    def run(self, stage: Stage) -> StageReport:
        if stage is Stage.INTAKE:
            raise ValueError("The intake form is scaffolded with 'new', not generated.")
        spec = stage.spec

        upstream, upstream_text = self._require_upstream(stage)
        template = load_template(self.config.template_path(spec.template), spec.command)
        print(f"[pipeline] Using {upstream.stage.spec.label}: {upstream.path}")

        prompt = compose(template, upstream_text, spec.marker, spec.template)
        print(f"[pipeline] Generating {spec.label} with {self.backend.name}...")
        print("[pipeline] This may take a moment depending on the LLM and prompt size...")
        result = self.backend.invoke(prompt)

        output = normalize(result.stdout, self.config.min_words)
        if not output.text.strip():
            raise BackendError(
                f"{self.backend.name} produced no output for the {spec.label}",
                diagnostics=result.stderr,
                returncode=result.returncode,
            )
        if output.stripped_fence:
            print("[pipeline] Removed markdown code block markers from output")

        path = write_artifact(self.config.specs_dir, spec.prefix, output.text, self.clock())
        return StageReport(
            stage=stage,
            artifact=path,
            upstream=upstream.path,
            word_count=output.word_count,
            line_count=output.line_count,
            stripped_fence=output.stripped_fence,
            preview=output.text.splitlines()[:PREVIEW_LINES],
            warnings=output.warnings,
        )

    def _require_upstream(self, stage: Stage) -> Tuple[Artifact, str]:
        upstream_stage = stage.spec.upstream
        candidate = self.repository.latest_candidate(upstream_stage)
        label = upstream_stage.spec.label
        producer = upstream_stage.spec.command

        if candidate is None:
            if upstream_stage is Stage.INTAKE:
                raise PreconditionMissing(
                    "Not in a project directory",
                    [
                        f"Requirements form not found: {self.repository.intake_path()}",
                        f"Create a project first with: spec-dev {producer}",
                        "Or run from within an existing project directory.",
                    ],
                )
            raise PreconditionMissing(
                f"No {label} found in {self.config.specs_dir}",
                [f"Please generate the {label} first with: spec-dev {producer}"],
            )
        if candidate.path.stat().st_size == 0:
            raise PreconditionMissing(
                f"The {label} is empty: {candidate.path}",
                [f"Fill it in or regenerate it with: spec-dev {producer}"],
            )
        try:
            text = candidate.read()
        except UnicodeDecodeError as exc:
            raise PreconditionMissing(
                f"The {label} is not valid UTF-8: {candidate.path}",
                [
                    f"Unreadable byte at position {exc.start}.",
                    "Save the file with UTF-8 encoding and run the command again.",
                ],
            ) from exc
        if upstream_stage is Stage.INTAKE and not is_intake_complete(text):
            raise IntakeIncomplete(REQUIRED_FIELD, str(candidate.path))
        return candidate, text
