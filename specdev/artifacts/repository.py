from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from specdev.gates.completion import is_intake_complete
from specdev.stages import GENERATED_STAGES, Stage
from specdev.utils.io import read_text


@dataclass(frozen=True)
class Artifact:
    stage: Stage
    path: Path

    def read(self) -> str:
        return read_text(self.path)


@dataclass(frozen=True)
class RepositorySnapshot:
    intake_present: bool = False
    intake_complete: bool = False
    latest: Dict[Stage, Optional[Path]] = field(default_factory=dict)

    def has(self, stage: Stage) -> bool:
        if stage is Stage.INTAKE:
            return self.intake_present
        return self.latest.get(stage) is not None


def artifact_pattern(prefix: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(prefix)}_(\d{{8}}_\d{{6}})(?:_(\d+))?\.md$")


class ArtifactRepository:
    def __init__(self, specs_dir: Path, intake_filename: str) -> None:
        self.specs_dir = specs_dir
        self.intake_filename = intake_filename

    def intake_path(self) -> Path:
        return self.specs_dir / self.intake_filename

    def has_intake(self) -> bool:
        return self.intake_path().is_file()

    def list_artifacts(self, stage: Stage) -> List[Artifact]:
        """History for a stage, oldest first."""
        prefix = stage.spec.prefix
        if prefix is None or not self.specs_dir.is_dir():
            return []
        pattern = artifact_pattern(prefix)
        found = []
        for path in self.specs_dir.iterdir():
            match = pattern.match(path.name)
            if path.name == self.intake_filename or match is None:
                continue
            if not path.is_file():
                continue
            # An unsuffixed file is the first write of its second.
            stamp, suffix = match.groups()
            found.append((path.stat().st_mtime_ns, stamp, int(suffix or 1), path))
        found.sort()
        return [Artifact(stage=stage, path=path) for _, _, _, path in found]

    def latest_candidate(self, stage: Stage) -> Optional[Artifact]:
        """Most recent matching file, even if it is empty."""
        if stage is Stage.INTAKE:
            path = self.intake_path()
            if not path.is_file():
                return None
            return Artifact(stage=stage, path=path)
        history = self.list_artifacts(stage)
        return history[-1] if history else None

    def find_latest(self, stage: Stage) -> Optional[Artifact]:
        candidate = self.latest_candidate(stage)
        if candidate is None or candidate.path.stat().st_size == 0:
            return None
        return candidate

    def snapshot(self) -> RepositorySnapshot:
        latest: Dict[Stage, Optional[Path]] = {}
        for stage in GENERATED_STAGES:
            artifact = self.find_latest(stage)
            latest[stage] = artifact.path if artifact else None
        intake = self.find_latest(Stage.INTAKE)
        complete = False
        if intake is not None:
            try:
                complete = is_intake_complete(intake.read())
            except UnicodeDecodeError:
                # Undecodable forms are reported by the orchestrator.
                complete = False
        return RepositorySnapshot(
            intake_present=intake is not None,
            intake_complete=complete,
            latest=latest,
        )
