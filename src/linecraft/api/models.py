"""Pydantic request models for the Linecraft API.

Models
------
RefinePromptRequest
    Payload for ``POST /api/refine-prompt``.

Only the *shape* of the request is validated here.  Content rules (length,
allowed preference values, moderation) live in the refinement service so
that a bad prompt still produces a fallback result rather than a 422.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from linecraft.core.models import RefinementOptions


class RefinePromptRequest(BaseModel):
    """Request body for the ``POST /api/refine-prompt`` endpoint.

    Attributes:
        prompt: The user's free-text description.
        customizations: Style preferences (complexity, age group, line
            thickness, border, theme).  Unknown keys are ignored.
        options: Per-call switches such as ``use_gpt``.
    """

    prompt: str = Field(
        ...,
        description="Free-text description of the coloring page subject.",
    )
    customizations: dict[str, Any] | None = Field(
        default=None,
        description="Style preferences; validated by the refinement service.",
    )
    options: RefinementOptions | None = Field(
        default=None,
        description="Refinement switches, e.g. {'use_gpt': true}.",
    )
