"""Prompt refinement service.

:class:`PromptRefinementService` turns a free-text subject plus style
preferences into a coloring page instruction.  It runs a fixed pipeline
and never raises to its caller:

1. **Validate** - sanitize the text, validate the preferences, moderate.
2. **Configure** - merge validated preferences over the defaults.
3. **Generate** - template path, or the completion-enhanced path when it
   is requested and enabled.  A failed completion falls back to the
   template path.
4. **Assemble** - build a successful :class:`RefinementResult`.
5. **Fallback** - any error in 1-4 yields ``success=False`` with a
   minimal, always-valid instruction and the error message.

Usage
-----
::

    service = PromptRefinementService(config)
    result = service.refine("a cute dog", {"complexity": "simple"})
    print(result.refined_prompt)

Construct one service at process start and pass it to callers; it holds
no per-call state.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from .catalog import CATEGORY_CATALOG, PHRASE_COUNT
from .classifier import detect_category
from .completion import CompletionClient, OpenAICompletionClient, build_completion_request
from .config import LinecraftConfig
from .exceptions import CatastrophicFailure, ExternalServiceError, ModerationError, ValidationError
from .models import (
    PreferenceSet,
    RefinementMetadata,
    RefinementMethod,
    RefinementOptions,
    RefinementResult,
    utc_timestamp,
)
from .sanitizer import (
    check_family_friendly,
    clean_text,
    salvage_customizations,
    sanitize_text,
    validate_customizations,
)
from .templates import CLAUSE_SEPARATOR, STYLE_CONSTRAINTS, TEMPLATE_CATALOG, TemplateEngine

logger = logging.getLogger(__name__)

GENERIC_FALLBACK_PROMPT = (
    "black-and-white line art coloring book page, family-friendly, no shading, 300 DPI"
)

_FALLBACK_SUBJECT = "drawing"
_COMPLETION_SUFFIX = ("black-and-white line art", *STYLE_CONSTRAINTS)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class PromptRefinementService:
    """Refines user descriptions into coloring page instructions.

    Args:
        config: Application configuration.  Decides whether the
            completion path is available.
        completion_client: Client for the completion service.  Defaults to
            an :class:`OpenAICompletionClient` built from ``config``.
        template_engine: Engine used by the template path.
    """

    def __init__(
        self,
        config: LinecraftConfig,
        completion_client: CompletionClient | None = None,
        template_engine: TemplateEngine | None = None,
    ):
        self.config = config
        self.completion_client = completion_client or OpenAICompletionClient(config)
        self.template_engine = template_engine or TemplateEngine()

        if config.completion_enabled:
            logger.info(f"Completion path enabled (model={config.completion_model})")
        else:
            logger.info(f"Completion path disabled (environment={config.environment})")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def refine(
        self,
        raw_input: Any,
        raw_preferences: Mapping[str, Any] | None = None,
        options: RefinementOptions | Mapping[str, Any] | None = None,
    ) -> RefinementResult:
        """Refine a user description into an image-generation instruction.

        Args:
            raw_input: The user's description, unvalidated.
            raw_preferences: Style preferences, unvalidated.  Both
                snake_case and camelCase keys are accepted.
            options: :class:`RefinementOptions` or an equivalent mapping.

        Returns:
            A :class:`RefinementResult`.  ``success`` is ``False`` when the
            fallback stage produced the prompt.
        """
        start = time.perf_counter()

        try:
            opts = self._resolve_options(options)

            # --- Validate --------------------------------------------------
            sanitized = sanitize_text(raw_input, self.config.max_input_length)
            validated = validate_customizations(raw_preferences)
            check_family_friendly(sanitized)

            logger.info(
                f"Starting prompt refinement (original_length={len(raw_input)}, "
                f"sanitized_length={len(sanitized)}, customizations={validated}, use_gpt={opts.use_gpt})"
            )

            # --- Configure -------------------------------------------------
            preferences = PreferenceSet(**validated)

            # --- Generate --------------------------------------------------
            category = detect_category(sanitized)
            method = self._select_method(opts)
            if method == "gpt-enhanced":
                refined, method = self._completion_refinement(sanitized, category, preferences, opts)
            else:
                refined = self._template_refinement(sanitized, category, preferences)

            # --- Assemble --------------------------------------------------
            elapsed = _elapsed_ms(start)
            logger.info(
                f"Prompt refinement completed via {method} in {elapsed}ms "
                f"(category={category}, refined_length={len(refined)})"
            )
            return RefinementResult(
                success=True,
                refined_prompt=refined,
                original_input=sanitized,
                detected_category=category,
                applied_settings=preferences,
                metadata=RefinementMetadata(
                    method=method,
                    processing_time_ms=elapsed,
                    sanitized=True,
                    family_friendly=True,
                ),
                timestamp=utc_timestamp(),
            )

        except (ValidationError, ModerationError) as e:
            logger.warning(f"Prompt rejected: {e}")
            return self._fallback_result(raw_input, raw_preferences, e, start)
        except Exception as e:
            preview = raw_input[:100] if isinstance(raw_input, str) else None
            logger.error(f"Prompt refinement error: {e} (input={preview!r})", exc_info=True)
            return self._fallback_result(raw_input, raw_preferences, e, start)

    def create_fallback_prompt(self, raw_input: Any, preferences: PreferenceSet | None = None) -> str:
        """Build a minimal instruction from best-effort input.

        Never raises.  Returns :data:`GENERIC_FALLBACK_PROMPT` when the
        input cannot be used at all.
        """
        try:
            return self._build_fallback_prompt(raw_input, preferences or PreferenceSet())
        except CatastrophicFailure as e:
            logger.error(f"Fallback prompt creation failed: {e}", exc_info=True)
            return GENERIC_FALLBACK_PROMPT

    def health_check(self) -> dict[str, Any]:
        """Report service status and, outside development, probe the
        completion service.

        Returns:
            Dictionary with ``status`` (``healthy`` or ``unhealthy``),
            ``timestamp``, ``environment``, ``features`` and mode details.
        """
        start = time.perf_counter()
        try:
            health: dict[str, Any] = {
                "status": "healthy",
                "timestamp": utc_timestamp(),
                "environment": self.config.environment,
                "features": {
                    "input_sanitization": True,
                    "categories": len(CATEGORY_CATALOG),
                    "phrases": PHRASE_COUNT,
                    "enhancement_templates": len(TEMPLATE_CATALOG),
                    "completion_refinement": self.config.completion_enabled,
                },
            }

            if self.config.environment == "development":
                health["mode"] = "development"
                health["api_key"] = "mock"
                health["response_time_ms"] = _elapsed_ms(start)
                return health

            health["mode"] = self.config.environment
            if not self.config.has_real_api_key:
                health["api_key"] = "mock"
                health["completion_connected"] = False
            else:
                list_models = getattr(self.completion_client, "list_models", None)
                health["api_key"] = "configured"
                if list_models is not None:
                    health["models_available"] = list_models()
                health["completion_connected"] = True
            health["response_time_ms"] = _elapsed_ms(start)

            logger.info(
                f"Health check completed (mode={health['mode']}, api_key={health['api_key']}, "
                f"completion_connected={health['completion_connected']})"
            )
            return health

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": utc_timestamp(),
            }

    # ------------------------------------------------------------------
    # Generation strategies
    # ------------------------------------------------------------------

    def _select_method(self, options: RefinementOptions) -> RefinementMethod:
        if options.use_gpt and self.config.completion_enabled:
            return "gpt-enhanced"
        if options.use_gpt:
            logger.info("Completion path requested but disabled; using templates")
        return "template-based"

    def _template_refinement(self, sanitized: str, category: str, preferences: PreferenceSet) -> str:
        return self.template_engine.render(sanitized, category, preferences)

    def _completion_refinement(
        self,
        sanitized: str,
        category: str,
        preferences: PreferenceSet,
        options: RefinementOptions,
    ) -> tuple[str, RefinementMethod]:
        """Try the completion service once; fall back to templates on failure."""
        request = build_completion_request(sanitized, preferences)
        try:
            text = self.completion_client.complete(request, timeout=options.timeout)
            if not isinstance(text, str) or not text.strip():
                raise ExternalServiceError("Completion service returned no text")
        except Exception as e:
            logger.warning(f"Completion refinement failed, falling back to templates: {e}")
            return self._template_refinement(sanitized, category, preferences), "template-based"

        return CLAUSE_SEPARATOR.join((text.strip(), *_COMPLETION_SUFFIX)), "gpt-enhanced"

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------

    def _resolve_options(self, options: RefinementOptions | Mapping[str, Any] | None) -> RefinementOptions:
        if isinstance(options, RefinementOptions):
            return options
        if isinstance(options, Mapping):
            return RefinementOptions.model_validate(dict(options))
        return RefinementOptions()

    def _fallback_subject(self, raw_input: Any, error: Exception | None) -> str:
        if isinstance(error, ModerationError) or not isinstance(raw_input, str):
            return _FALLBACK_SUBJECT
        try:
            subject = sanitize_text(raw_input, self.config.max_input_length)
        except ValidationError:
            subject = clean_text(raw_input)[: self.config.max_input_length].strip()
        if not subject:
            return _FALLBACK_SUBJECT

        # Moderation may not have run yet when validation failed first.
        try:
            check_family_friendly(subject)
        except ModerationError:
            return _FALLBACK_SUBJECT
        return subject

    def _build_fallback_prompt(
        self,
        raw_input: Any,
        preferences: PreferenceSet,
        error: Exception | None = None,
    ) -> str:
        try:
            subject = self._fallback_subject(raw_input, error)
            border = "with border" if preferences.border == "with" else "no border"
            return (
                f"black-and-white line art of {subject}, {preferences.complexity} complexity, "
                f"{preferences.age_group} style, {preferences.line_thickness} lines, {border}, "
                "coloring book style, family-friendly, no shading, 300 DPI"
            )
        except Exception as e:
            raise CatastrophicFailure(f"Cannot build fallback prompt: {e}") from e

    def _fallback_result(
        self,
        raw_input: Any,
        raw_preferences: Any,
        error: Exception,
        start: float,
    ) -> RefinementResult:
        try:
            preferences = PreferenceSet(**salvage_customizations(raw_preferences))
        except Exception:
            logger.error("Could not salvage preferences; using defaults", exc_info=True)
            preferences = PreferenceSet()

        try:
            refined = self._build_fallback_prompt(raw_input, preferences, error)
        except CatastrophicFailure as e:
            logger.error(f"Fallback prompt creation failed: {e}", exc_info=True)
            refined = GENERIC_FALLBACK_PROMPT

        return RefinementResult(
            success=False,
            refined_prompt=refined,
            original_input=raw_input if isinstance(raw_input, str) else None,
            detected_category=None,
            applied_settings=preferences,
            metadata=RefinementMetadata(method="fallback", processing_time_ms=_elapsed_ms(start)),
            error=str(error) or error.__class__.__name__,
            timestamp=utc_timestamp(),
        )
