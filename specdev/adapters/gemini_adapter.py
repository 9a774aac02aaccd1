from __future__ import annotations

import os
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from specdev.errors import BackendError, BackendUnavailable

from .backend_base import GenerationResult


class GeminiBackend:
    name = "gemini"

    def __init__(
        self,
        model: str = "gemini-flash-latest",
        max_output_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Any = None,
    ) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        if client is None:
            api_key = os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise BackendUnavailable(
                    "GEMINI_API_KEY is not set.",
                    ["Add GEMINI_API_KEY to the project's .env file or the environment."],
                )
            client = genai.Client(api_key=api_key, http_options=self.http_options())
        self.client = client

    def http_options(self) -> Optional[types.HttpOptions]:
        if self.timeout is None:
            return None
        # The SDK takes milliseconds.
        return types.HttpOptions(timeout=int(self.timeout * 1000))

    def invoke(self, prompt: str) -> GenerationResult:
        config = None
        if self.max_output_tokens:
            config = types.GenerateContentConfig(max_output_tokens=self.max_output_tokens)
        print(f"[gemini] model={self.model}")
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise BackendError(f"Gemini request failed: {exc}", diagnostics=str(exc)) from exc

        text = getattr(response, "text", None)
        if not text:
            raise BackendError("Gemini returned empty content.")
        return GenerationResult(stdout=text)
