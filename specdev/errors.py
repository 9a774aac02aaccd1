from __future__ import annotations

from typing import List, Optional, Sequence


class PipelineError(Exception):
    """Fatal pipeline condition; the CLI prints message and remediation and exits 1."""

    def __init__(self, message: str, remediation: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.remediation: List[str] = list(remediation or [])


class PreconditionMissing(PipelineError):
    pass


class IntakeIncomplete(PipelineError):
    def __init__(self, field: str, form_path: str) -> None:
        super().__init__(
            "Requirements form appears incomplete",
            [
                f"The {field} field is empty or still contains placeholder text.",
                f"Please fill out the requirements form ({form_path}) before generating requirements.",
                "Tip: Edit the form and replace the comment placeholders with your actual requirements.",
            ],
        )
        self.field = field
        self.form_path = form_path


class MissingPlaceholder(PipelineError):
    def __init__(self, template: str, marker: str, count: int) -> None:
        found = "not found" if count == 0 else f"found {count} times"
        super().__init__(
            f"Template placeholder {found} in {template}",
            [
                "The template must contain exactly one line with the marker:",
                f"  {marker}",
            ],
        )
        self.template = template
        self.marker = marker
        self.count = count


class BackendUnavailable(PipelineError):
    pass


class BackendError(PipelineError):
    def __init__(
        self,
        message: str,
        diagnostics: str = "",
        returncode: Optional[int] = None,
        remediation: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message, remediation)
        self.diagnostics = diagnostics
        self.returncode = returncode


class OutputTooShort(UserWarning):
    def __init__(self, word_count: int, min_words: int) -> None:
        super().__init__(
            f"Generated document seems quite short ({word_count} words, expected at least {min_words})"
        )
        self.word_count = word_count
        self.min_words = min_words
