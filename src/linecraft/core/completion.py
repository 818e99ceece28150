"""External completion service client.

The completion-enhanced refinement path sends one chat completion request
to an OpenAI-compatible endpoint and uses the returned text as the subject
description.  Every failure mode (timeout, transport error, non-2xx status,
malformed payload) surfaces as :class:`ExternalServiceError`; the caller
decides what to fall back to.

There are no retries: each request performs at most one HTTP call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from .config import LinecraftConfig
from .exceptions import ExternalServiceError
from .models import PreferenceSet

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert at creating DALL-E prompts for high-quality coloring book pages. "
    "Transform descriptions into detailed, optimized prompts for perfect black-and-white line art."
)


@dataclass(frozen=True)
class CompletionRequest:
    """A single completion request: fixed system text plus one user message."""

    system_instruction: str
    user_message: str


class CompletionClient(Protocol):
    """Anything that can turn a :class:`CompletionRequest` into text."""

    def complete(self, request: CompletionRequest, timeout: float | None = None) -> str: ...


def build_completion_request(subject: str, preferences: PreferenceSet) -> CompletionRequest:
    """Build the request for a sanitized subject and resolved preferences."""
    border = "with border" if preferences.border == "with" else "no border"
    border_requirement = (
        "Decorative border included" if preferences.border == "with" else "Clean edges, no border"
    )
    user_message = f"""Transform this coloring book request into an optimized DALL-E prompt for perfect black-and-white line art:

Original: "{subject}"
Target: {preferences.age_group} ({preferences.complexity} complexity, {preferences.line_thickness} lines, {border})

Requirements:
- Black-and-white line art only
- Age-appropriate for {preferences.age_group}
- {preferences.complexity} level detail
- {preferences.line_thickness} line thickness
- {border_requirement}
- Family-friendly content
- Clear outlines, no shading
- 300 DPI print quality
- Professional coloring book style

Generate only the refined DALL-E prompt:"""
    return CompletionRequest(system_instruction=SYSTEM_INSTRUCTION, user_message=user_message)


class OpenAICompletionClient:
    """Completion client for OpenAI-compatible ``/chat/completions`` APIs.

    Args:
        config: Supplies the API key, base URL, model and request limits.
        transport: Optional httpx transport, used by tests to stub the
            remote service.
    """

    def __init__(self, config: LinecraftConfig, transport: httpx.BaseTransport | None = None):
        self.config = config
        self.transport = transport

    def _client(self, timeout: float | None) -> httpx.Client:
        return httpx.Client(
            base_url=self.config.openai_base_url,
            headers={
                "Authorization": f"Bearer {self.config.openai_api_key or ''}",
                "Content-Type": "application/json",
            },
            timeout=timeout if timeout is not None else self.config.completion_timeout,
            transport=self.transport,
        )

    def complete(self, request: CompletionRequest, timeout: float | None = None) -> str:
        """Send one completion request and return the stripped text.

        Raises:
            ExternalServiceError: On any transport, status or payload problem.
        """
        payload = {
            "model": self.config.completion_model,
            "messages": [
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.user_message},
            ],
            "max_tokens": self.config.completion_max_tokens,
            "temperature": self.config.completion_temperature,
        }

        try:
            with self._client(timeout) as client:
                response = client.post("/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise ExternalServiceError(f"Completion request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                f"Completion service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Completion service returned invalid JSON") from e

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("Completion response is missing message content") from e

        if not isinstance(text, str) or not text.strip():
            raise ExternalServiceError("Completion response is empty")

        return text.strip()

    def list_models(self, timeout: float | None = None) -> int:
        """Return the number of models the service reports.

        Used as a connectivity probe by the health check.

        Raises:
            ExternalServiceError: If the probe fails.
        """
        try:
            with self._client(timeout) as client:
                response = client.get("/models")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Model listing failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Model listing returned invalid JSON") from e

        models = data.get("data") if isinstance(data, dict) else None
        return len(models) if isinstance(models, list) else 0
