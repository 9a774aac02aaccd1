from __future__ import annotations

import os
from typing import Any, Dict, Optional

from openai import APIError, OpenAI

from specdev.errors import BackendError, BackendUnavailable

from .backend_base import GenerationResult


class OpenAIBackend:
    """Single chat completion per prompt; API failures are surfaced, never retried."""

    name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_output_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Any = None,
    ) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        if client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise BackendUnavailable(
                    "OPENAI_API_KEY is not set.",
                    ["Add OPENAI_API_KEY to the project's .env file or the environment."],
                )
            client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client

    def invoke(self, prompt: str) -> GenerationResult:
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.max_output_tokens:
            request["max_tokens"] = self.max_output_tokens
        try:
            response = self.client.chat.completions.create(**request)
        except APIError as exc:
            raise BackendError(f"OpenAI request failed: {exc}", diagnostics=str(exc)) from exc

        content = response.choices[0].message.content
        if content is None:
            raise BackendError("OpenAI returned empty content.")
        usage = getattr(response, "usage", None)
        if usage:
            print(
                f"[openai] model={self.model} "
                f"prompt_tokens={getattr(usage, 'prompt_tokens', None)} "
                f"completion_tokens={getattr(usage, 'completion_tokens', None)}"
            )
        return GenerationResult(stdout=content)
