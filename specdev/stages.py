from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Stage(Enum):
    INTAKE = 0
    REQUIREMENTS = 1
    DESIGN = 2
    IMPLEMENTATION = 3

    @property
    def spec(self) -> "StageSpec":
        return STAGE_SPECS[self]

    @classmethod
    def from_command(cls, command: str) -> "Stage":
        for stage, spec in STAGE_SPECS.items():
            if spec.command == command:
                return stage
        raise ValueError(f"Unknown stage command: {command}")


@dataclass(frozen=True)
class StageSpec:
    command: str
    label: str
    template: str
    upstream: Optional[Stage] = None
    marker: Optional[str] = None
    prefix: Optional[str] = None


INTAKE_FILENAME = "requirements_form.md"
REQUIRED_FIELD = "Project Name"

STAGE_SPECS: Dict[Stage, StageSpec] = {
    Stage.INTAKE: StageSpec(
        command="new",
        label="requirements form",
        template=INTAKE_FILENAME,
    ),
    Stage.REQUIREMENTS: StageSpec(
        command="requirements",
        label="requirements document",
        template="requirements_prompt.md",
        upstream=Stage.INTAKE,
        marker="[The completed requirements form will be inserted here by the script]",
        prefix="requirements",
    ),
    Stage.DESIGN: StageSpec(
        command="design",
        label="design document",
        template="design_prompt.md",
        upstream=Stage.REQUIREMENTS,
        marker="[The requirements document will be inserted here by the script]",
        prefix="design",
    ),
    Stage.IMPLEMENTATION: StageSpec(
        command="implementation",
        label="implementation plan",
        template="implementation_prompt.md",
        upstream=Stage.DESIGN,
        marker="[The design document will be inserted here by the script]",
        prefix="implementation",
    ),
}

GENERATED_STAGES = (Stage.REQUIREMENTS, Stage.DESIGN, Stage.IMPLEMENTATION)
