from __future__ import annotations

import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from specdev.errors import BackendError, BackendUnavailable
from specdev.utils.io import write_text

from .backend_base import GenerationResult

PROMPT_PLACEHOLDER = "{prompt}"

LIKELY_CAUSES = [
    "Possible issues:",
    "  - LLM service unavailable",
    "  - API key not configured",
    "  - Prompt too large",
    "  - Rate limiting",
]


class SubprocessBackend:
    """Runs an external generator that reads a prompt file and writes the document to stdout."""

    def __init__(
        self,
        command: str,
        timeout: Optional[float] = None,
        staging_root: Optional[Path] = None,
    ) -> None:
        self.argv: List[str] = shlex.split(command)
        if not self.argv:
            raise ValueError("Backend command must not be empty.")
        self.timeout = timeout
        self.staging_root = staging_root
        self.name = self.argv[0]

    def ensure_available(self) -> str:
        resolved = shutil.which(self.argv[0])
        if resolved is None:
            raise BackendUnavailable(
                f"{self.name} is not installed or not in PATH",
                [
                    "Please install aichat from: https://github.com/sigoden/aichat",
                    "",
                    "Installation options:",
                    "  - Download binary from releases",
                    "  - cargo install aichat",
                    "  - Package managers (homebrew, etc.)",
                    "",
                    "Or set SPECDEV_COMMAND to another generator that takes a prompt file",
                    "and prints the document on stdout.",
                ],
            )
        return resolved

    def _command_for(self, prompt_path: Path) -> List[str]:
        if any(PROMPT_PLACEHOLDER in arg for arg in self.argv):
            return [arg.replace(PROMPT_PLACEHOLDER, str(prompt_path)) for arg in self.argv]
        return [*self.argv, str(prompt_path)]

    def invoke(self, prompt: str) -> GenerationResult:
        executable = self.ensure_available()
        print(f"[backend] {self.name} found: {executable}")
        with tempfile.TemporaryDirectory(prefix="specdev-", dir=self.staging_root) as staging:
            prompt_path = Path(staging) / "full_prompt.md"
            write_text(prompt_path, prompt)
            command = self._command_for(prompt_path)
            try:
                completed = subprocess.run(
                    command,
                    check=False,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                stderr = exc.stderr or ""
                if isinstance(stderr, bytes):
                    stderr = stderr.decode("utf-8", errors="replace")
                raise BackendError(
                    f"{self.name} did not finish within {self.timeout:g} seconds",
                    diagnostics=stderr,
                    remediation=LIKELY_CAUSES,
                ) from exc
            except FileNotFoundError as exc:
                raise BackendUnavailable(f"{self.name} could not be started: {exc}") from exc

        result = GenerationResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )
        if not result.ok:
            raise BackendError(
                f"{self.name} exited with status {completed.returncode}",
                diagnostics=result.stderr,
                returncode=completed.returncode,
                remediation=LIKELY_CAUSES,
            )
        return result
