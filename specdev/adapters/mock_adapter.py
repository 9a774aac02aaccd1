from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Dict, List

from .backend_base import GenerationResult

_SECTIONS: Dict[str, List[str]] = {
    "requirements": [
        "Introduction",
        "Functional Requirements",
        "Non-Functional Requirements",
        "Constraints",
        "Acceptance Criteria",
    ],
    "design": [
        "Overview",
        "Architecture",
        "Components and Interfaces",
        "Data Models",
        "Error Handling",
        "Testing Strategy",
    ],
    "implementation": [
        "Phase 1: Project Setup",
        "Phase 2: Core Features",
        "Phase 3: Integration",
        "Phase 4: Testing and Deployment",
    ],
}

_FILLER = (
    "This section was produced by the offline mock backend so the pipeline can be "
    "exercised end to end without calling a language model. It restates the input "
    "in generic terms and should be replaced by a real generation before review."
)


@dataclass
class MockBackend:
    """Deterministic stand-in for a real generator; output depends only on the prompt."""

    name: str = "mock"
    fenced: bool = True
    calls: List[str] = field(default_factory=list)

    def invoke(self, prompt: str) -> GenerationResult:
        self.calls.append(prompt)
        return GenerationResult(stdout=self._build_document(prompt))

    def _kind(self, prompt: str) -> str:
        heading = next((line for line in prompt.splitlines() if line.strip()), "").lower()
        if "implementation" in heading:
            return "implementation"
        if "design" in heading:
            return "design"
        return "requirements"

    def _build_document(self, prompt: str) -> str:
        kind = self._kind(prompt)
        digest = hashlib.sha256(prompt.encode("utf-8")).hexdigest()[:12]
        lines = [f"# Mock {kind.title()} Document", "", f"Prompt digest: {digest}", ""]
        for section in _SECTIONS[kind]:
            lines.extend([f"## {section}", "", _FILLER, ""])
        body = "\n".join(lines).rstrip() + "\n"
        if self.fenced:
            return f"```markdown\n{body}```\n"
        return body
