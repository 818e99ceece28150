"""Input sanitization and moderation for user prompts and preferences."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from .exceptions import ModerationError, ValidationError
from .models import AGE_GROUPS, BORDER_OPTIONS, COMPLEXITY_LEVELS, LINE_THICKNESSES, THEMES

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 500

_STRIP_CHARS = re.compile(r"[<>\"'`]")
_WHITESPACE = re.compile(r"\s+")

# field name -> (accepted wire keys, allowed values, error message)
_PREFERENCE_FIELDS: tuple[tuple[str, tuple[str, ...], tuple[str, ...], str], ...] = (
    ("complexity", ("complexity",), COMPLEXITY_LEVELS, "Invalid complexity level"),
    ("age_group", ("age_group", "ageGroup"), AGE_GROUPS, "Invalid age group"),
    ("line_thickness", ("line_thickness", "lineThickness"), LINE_THICKNESSES, "Invalid line thickness"),
    ("border", ("border",), BORDER_OPTIONS, "Invalid border option"),
    ("theme", ("theme",), THEMES, "Invalid theme"),
)

BLOCKED_TERMS: tuple[str, ...] = (
    # violence and weapons
    "violence", "blood", "weapon", "gun", "knife", "death", "kill", "murder",
    # sexual content
    "sexual", "nude", "naked", "adult", "explicit", "inappropriate", "sexy",
    # substances
    "drug", "alcohol", "beer", "wine", "cigarette", "smoking", "marijuana",
    # occult and horror
    "scary", "horror", "demon", "devil", "evil", "dark magic", "satanic",
    # self-harm
    "suicide", "self-harm", "cutting", "depression", "anxiety",
)


def clean_text(value: str) -> str:
    """Trim, drop angle brackets, quotes and backticks, and collapse whitespace.

    No length or emptiness checks; see :func:`sanitize_text`.
    """
    cleaned = value.strip()
    cleaned = _STRIP_CHARS.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    # Removing quotes can expose leading/trailing spaces ("' dog '").
    return cleaned.strip()


def sanitize_text(value: Any, max_length: int = MAX_INPUT_LENGTH) -> str:
    """Normalize free text from the user.

    Trims the text, removes angle brackets, quotes and backticks, and
    collapses runs of whitespace to a single space.

    Args:
        value: Raw user input.
        max_length: Maximum allowed length after sanitation.

    Returns:
        The sanitized text.

    Raises:
        ValidationError: If the value is missing, not a string, or its
            sanitized length is outside ``[1, max_length]``.
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Invalid input: must be a non-empty string")

    sanitized = clean_text(value)
    if len(sanitized) < 1 or len(sanitized) > max_length:
        raise ValidationError(f"Input must be between 1 and {max_length} characters")

    return sanitized


def _lookup(raw: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key):
            return raw[key]
    return None


def validate_customizations(raw: Any) -> dict[str, str]:
    """Validate user style preferences.

    Only fields present in ``raw`` appear in the result; defaults are the
    caller's job.  Unknown fields are ignored.

    Args:
        raw: Mapping of preference fields, or ``None``.

    Returns:
        Dictionary of validated fields keyed by snake_case name.

    Raises:
        ValidationError: If any present field is outside its allowed values.
    """
    if not isinstance(raw, Mapping):
        return {}

    validated: dict[str, str] = {}
    for name, keys, allowed, message in _PREFERENCE_FIELDS:
        value = _lookup(raw, keys)
        if value is None:
            continue
        if value not in allowed:
            raise ValidationError(message)
        validated[name] = value

    return validated


def salvage_customizations(raw: Any) -> dict[str, str]:
    """Keep only the individually valid preference fields.

    Never raises.  Used when building a fallback prompt after validation
    failed, so one bad field does not discard the others.
    """
    if not isinstance(raw, Mapping):
        return {}

    salvaged: dict[str, str] = {}
    for name, keys, allowed, _ in _PREFERENCE_FIELDS:
        value = _lookup(raw, keys)
        if isinstance(value, str) and value in allowed:
            salvaged[name] = value
    return salvaged


def check_family_friendly(text: str) -> bool:
    """Reject text containing any blocked term.

    Matching is a case-insensitive substring test, so ``"Knives"`` does not
    match ``"knife"`` but ``"gunpowder"`` matches ``"gun"``.

    Returns:
        True if no blocked term is present.

    Raises:
        ModerationError: Naming every matched term.
    """
    lowered = text.lower()
    found = [term for term in BLOCKED_TERMS if term in lowered]
    if found:
        logger.debug(f"Blocked terms in input: {', '.join(found)}")
        raise ModerationError(found)
    return True
