"""Pydantic data models for prompt refinement.

Models
------
PreferenceSet
    Validated style configuration with documented defaults.
RefinementMetadata
    How a result was produced (method, timing, moderation flags).
RefinementResult
    The structured value returned by every ``refine`` call.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

Complexity = Literal["simple", "medium", "detailed"]
AgeGroup = Literal["kids", "teens", "adults"]
LineThickness = Literal["thin", "medium", "thick"]
Border = Literal["with", "without"]
Theme = Literal["animals", "mandalas", "fantasy", "nature", "vehicles", "food", "holidays", "sports"]
RefinementMethod = Literal["template-based", "gpt-enhanced", "fallback"]

COMPLEXITY_LEVELS: tuple[str, ...] = get_args(Complexity)
AGE_GROUPS: tuple[str, ...] = get_args(AgeGroup)
LINE_THICKNESSES: tuple[str, ...] = get_args(LineThickness)
BORDER_OPTIONS: tuple[str, ...] = get_args(Border)
THEMES: tuple[str, ...] = get_args(Theme)


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class PreferenceSet(BaseModel):
    """Style preferences for a coloring page.

    Every field has a default, so ``PreferenceSet()`` is the documented
    default configuration.  Values outside the enumerations are rejected
    by pydantic; the sanitizer rejects them earlier with friendlier
    messages.

    Attributes:
        complexity: Amount of descriptive detail.
        age_group: Target audience.
        line_thickness: Outline weight.
        border: ``"with"`` for a decorative border, ``"without"`` for none.
        theme: Optional overall theme.
    """

    model_config = ConfigDict(frozen=True)

    complexity: Complexity = Field(default="medium")
    age_group: AgeGroup = Field(default="kids")
    line_thickness: LineThickness = Field(default="medium")
    border: Border = Field(default="with")
    theme: Theme | None = Field(default=None)


class RefinementOptions(BaseModel):
    """Per-call switches for ``refine``.

    Attributes:
        use_gpt: Request the completion-enhanced path.  Ignored when the
            service has completions disabled.  Also accepted as ``useGPT``.
        timeout: Seconds to wait for the completion service, overriding
            the configured default.
    """

    model_config = ConfigDict(populate_by_name=True)

    use_gpt: bool = Field(default=False, alias="useGPT")
    timeout: float | None = Field(default=None, gt=0)


class RefinementMetadata(BaseModel):
    """Diagnostic details attached to a refinement result."""

    method: RefinementMethod
    processing_time_ms: float = Field(..., ge=0)
    sanitized: bool = False
    family_friendly: bool = False


class RefinementResult(BaseModel):
    """Outcome of a single ``refine`` call.

    ``success`` is ``False`` when the fallback stage produced the prompt;
    ``error`` then carries the user-facing reason.

    Attributes:
        success: Whether the normal pipeline completed.
        refined_prompt: The final instruction string.  Never empty.
        original_input: Sanitized input on success, raw input (when it was
            a string) on fallback.
        detected_category: Classifier output, ``None`` on fallback.
        applied_settings: The preferences the prompt was built with.
        metadata: Method and timing information.
        error: Failure message on fallback, otherwise ``None``.
        timestamp: ISO-8601 UTC creation time.
    """

    success: bool
    refined_prompt: str = Field(..., min_length=1)
    original_input: str | None = None
    detected_category: str | None = None
    applied_settings: PreferenceSet = Field(default_factory=PreferenceSet)
    metadata: RefinementMetadata
    error: str | None = None
    timestamp: str = Field(default_factory=utc_timestamp)
