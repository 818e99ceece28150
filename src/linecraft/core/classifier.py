"""Keyword-based subject classification."""

from __future__ import annotations

import logging

from .catalog import CATEGORY_CATALOG, GENERAL_CATEGORY

logger = logging.getLogger(__name__)

Catalog = tuple[tuple[str, tuple[str, ...]], ...]


def score_categories(text: str, catalog: Catalog = CATEGORY_CATALOG) -> list[tuple[str, int]]:
    """Count the distinct phrases of each category found in ``text``.

    A phrase counts once no matter how often it occurs.  Matching is a
    case-insensitive substring test, so ``"cat"`` also matches ``"catch"``.

    Returns:
        ``(category, score)`` pairs in catalog order.
    """
    lowered = text.lower()
    return [(category, sum(1 for phrase in set(phrases) if phrase in lowered)) for category, phrases in catalog]


def detect_category(text: str, catalog: Catalog = CATEGORY_CATALOG) -> str:
    """Pick the category with the most matching phrases.

    A later category only replaces the current best when its score is
    strictly greater, so ties go to the category declared first.

    Args:
        text: Sanitized subject description.
        catalog: Ordered ``(category, phrases)`` pairs.

    Returns:
        The winning category name, or ``"general"`` when nothing matches.
    """
    best_category, best_score = GENERAL_CATEGORY, 0
    for category, score in score_categories(text, catalog):
        if score > best_score:
            best_category, best_score = category, score

    logger.debug(f"Subject category detected: {best_category} (score={best_score}) for {text[:50]!r}")
    return best_category
