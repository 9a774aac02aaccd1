from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class GenerationResult:
    stdout: str
    stderr: str = ""
    returncode: Optional[int] = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GenerationBackend(Protocol):
    name: str

    def invoke(self, prompt: str) -> GenerationResult:
        """Run one generation; raise BackendUnavailable or BackendError on failure."""
        raise NotImplementedError
