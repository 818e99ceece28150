"""Core prompt refinement engine.

This package turns a user's free-text description plus style preferences
into a moderated, classified, template-expanded coloring page instruction.

Architecture Overview
---------------------
Components, leaf-first:

1. **Sanitizer** (sanitizer.py):
   - Text normalization and length limits
   - Preference validation against fixed enumerations
   - Family-friendly block-list moderation

2. **Classifier** (classifier.py, catalog.py):
   - Ordered category catalog of subject phrases
   - Distinct-phrase scoring with first-declared tie-break

3. **TemplateEngine** (templates.py):
   - Category/complexity templates and age suffixes
   - Ordered production clauses, style constraints last

4. **Completion client** (completion.py):
   - Optional OpenAI-compatible enhancement, single bounded call

5. **PromptRefinementService** (refinement.py):
   - Validate, configure, generate, assemble, and fall back

Usage Example
-------------
    from linecraft.core import PromptRefinementService, config

    service = PromptRefinementService(config)
    result = service.refine("a cute dog", {"complexity": "simple"})
"""

from linecraft.core.classifier import detect_category
from linecraft.core.config import LinecraftConfig, config
from linecraft.core.exceptions import (
    CatastrophicFailure,
    ExternalServiceError,
    ModerationError,
    RefinementError,
    ValidationError,
)
from linecraft.core.models import PreferenceSet, RefinementOptions, RefinementResult
from linecraft.core.refinement import PromptRefinementService
from linecraft.core.templates import TemplateEngine

__all__ = [
    "CatastrophicFailure",
    "ExternalServiceError",
    "LinecraftConfig",
    "ModerationError",
    "PreferenceSet",
    "PromptRefinementService",
    "RefinementError",
    "RefinementOptions",
    "RefinementResult",
    "TemplateEngine",
    "ValidationError",
    "config",
    "detect_category",
]
