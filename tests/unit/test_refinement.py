"""Unit tests for PromptRefinementService.

Covers the template path, the completion-enhanced path and its fallback,
the fallback stage for rejected input, and the health check.
"""

import logging

import pytest

from linecraft.core.config import LinecraftConfig
from linecraft.core.exceptions import CatastrophicFailure, ExternalServiceError
from linecraft.core.models import PreferenceSet, RefinementOptions, RefinementResult
from linecraft.core.refinement import GENERIC_FALLBACK_PROMPT, PromptRefinementService
from linecraft.core.templates import CLAUSE_SEPARATOR, STYLE_CONSTRAINTS

STYLE_TAIL = CLAUSE_SEPARATOR.join(STYLE_CONSTRAINTS)


class HostileText(str):
    """A string whose methods blow up, to exercise the last-resort branch."""

    def strip(self, *args):
        raise RuntimeError("cannot strip")

    def split(self, *args, **kwargs):
        raise RuntimeError("cannot split")


class TestTemplateRefinement:
    """Tests for the default template-based path."""

    def test_log_messages_carry_context(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="linecraft.core.refinement"):
            service.refine("a cute dog", {"complexity": "simple"})

        assert "sanitized_length=10" in caplog.text
        assert "'complexity': 'simple'" in caplog.text
        assert "category=domesticAnimals" in caplog.text

    def test_cute_dog_end_to_end(self, service):
        result = service.refine("a cute dog", {})

        assert isinstance(result, RefinementResult)
        assert result.success is True
        assert result.detected_category == "domesticAnimals"
        assert result.applied_settings.model_dump() == {
            "complexity": "medium",
            "age_group": "kids",
            "line_thickness": "medium",
            "border": "with",
            "theme": None,
        }
        assert "dog" in result.refined_prompt
        assert result.refined_prompt.endswith(STYLE_TAIL)
        assert result.metadata.method == "template-based"
        assert result.metadata.sanitized is True
        assert result.metadata.family_friendly is True
        assert result.error is None

    def test_original_input_is_sanitized(self, service):
        result = service.refine("  a   <cute>   dog ")
        assert result.original_input == "a cute dog"

    def test_preferences_applied(self, service):
        result = service.refine(
            "a dragon",
            {"complexity": "detailed", "ageGroup": "adults", "lineThickness": "thin", "border": "without"},
        )
        assert result.success is True
        assert result.applied_settings == PreferenceSet(
            complexity="detailed", age_group="adults", line_thickness="thin", border="without"
        )
        assert "intricate a dragon with complex magical patterns" in result.refined_prompt
        assert "designed for adults target audience" in result.refined_prompt
        assert "with clean edges and no border" in result.refined_prompt

    def test_theme_is_carried(self, service):
        result = service.refine("a rose", {"theme": "nature"})
        assert result.applied_settings.theme == "nature"

    def test_no_preferences(self, service):
        assert service.refine("a cute dog").success is True

    def test_non_mapping_preferences_ignored(self, service):
        result = service.refine("a cute dog", ["complexity", "simple"])
        assert result.success is True
        assert result.applied_settings == PreferenceSet()

    def test_general_category(self, service):
        result = service.refine("xyz qqq")
        assert result.detected_category == "general"
        assert "detailed xyz qqq with enhanced features" in result.refined_prompt

    def test_timing_and_timestamp(self, service):
        result = service.refine("a cute dog")
        assert result.metadata.processing_time_ms >= 0
        assert result.timestamp.endswith("+00:00")


class TestFallback:
    """Tests for the fallback stage."""

    def test_empty_input(self, service):
        result = service.refine("", {})

        assert result.success is False
        assert result.metadata.method == "fallback"
        assert result.refined_prompt
        assert "drawing" in result.refined_prompt
        assert result.error == "Invalid input: must be a non-empty string"
        assert result.detected_category is None

    @pytest.mark.parametrize("value", [None, 42, ["dog"]])
    def test_non_string_input(self, service, value):
        result = service.refine(value)
        assert result.success is False
        assert result.original_input is None
        assert result.refined_prompt.startswith("black-and-white line art of drawing")

    def test_oversized_input_is_truncated(self, service):
        result = service.refine("dog " * 200)
        assert result.success is False
        assert "between 1 and 500" in result.error
        assert len(result.refined_prompt) < 700

    def test_moderation_blocks_knife(self, service):
        result = service.refine("a chef holding a knife", {})

        assert result.success is False
        assert "knife" in result.error
        assert result.metadata.method == "fallback"
        assert result.metadata.family_friendly is False
        assert "knife" not in result.refined_prompt

    def test_blocked_term_with_invalid_preference(self, service):
        result = service.refine("a chef holding a knife", {"complexity": "extreme"})

        assert result.success is False
        assert result.error == "Invalid complexity level"
        assert "knife" not in result.refined_prompt
        assert result.refined_prompt.startswith("black-and-white line art of drawing")

    def test_blocked_term_in_oversized_input(self, service):
        result = service.refine("knife " + "dog " * 200)

        assert result.success is False
        assert "between 1 and 500" in result.error
        assert "knife" not in result.refined_prompt
        assert result.refined_prompt.startswith("black-and-white line art of drawing")

    def test_oversized_input_is_stripped_of_markup(self, service):
        result = service.refine("<script>`x`</script> " + "dog " * 200)

        assert result.success is False
        assert result.refined_prompt.startswith("black-and-white line art of scriptx/script dog dog")
        for char in "<>\"'`":
            assert char not in result.refined_prompt

    def test_out_of_enum_preference(self, service):
        result = service.refine("a cute dog", {"complexity": "extreme"})

        assert result.success is False
        assert result.error == "Invalid complexity level"
        assert result.applied_settings == PreferenceSet()
        assert "medium complexity" in result.refined_prompt
        assert "a cute dog" in result.refined_prompt

    def test_valid_preferences_survive_rejection(self, service):
        result = service.refine("a cute dog", {"complexity": "extreme", "border": "without", "ageGroup": "teens"})
        assert result.applied_settings.complexity == "medium"
        assert result.applied_settings.border == "without"
        assert result.applied_settings.age_group == "teens"
        assert "no border" in result.refined_prompt

    def test_invalid_options_fall_back(self, service):
        result = service.refine("a cute dog", {}, {"timeout": -1})
        assert result.success is False
        assert result.metadata.method == "fallback"

    def test_unusable_input_returns_generic_prompt(self, service):
        result = service.refine(HostileText("a cute dog"))
        assert result.success is False
        assert result.refined_prompt == GENERIC_FALLBACK_PROMPT
        assert "cannot strip" in result.error

    def test_never_raises(self, service):
        for value in [None, "", " ", object(), b"bytes", "x" * 10_000, HostileText("x")]:
            assert isinstance(service.refine(value, {"border": object()}), RefinementResult)


class TestCreateFallbackPrompt:
    """Tests for PromptRefinementService.create_fallback_prompt."""

    def test_uses_defaults(self, service):
        assert service.create_fallback_prompt("an owl") == (
            "black-and-white line art of an owl, medium complexity, kids style, medium lines, "
            "with border, coloring book style, family-friendly, no shading, 300 DPI"
        )

    def test_uses_given_preferences(self, service):
        prompt = service.create_fallback_prompt("an owl", PreferenceSet(complexity="simple", border="without"))
        assert "simple complexity" in prompt
        assert "no border" in prompt

    def test_blocked_term_is_replaced(self, service):
        prompt = service.create_fallback_prompt("a scary owl")
        assert prompt.startswith("black-and-white line art of drawing,")
        assert "scary" not in prompt

    def test_unusable_input(self, service):
        assert service.create_fallback_prompt(HostileText("owl")) == GENERIC_FALLBACK_PROMPT

    def test_build_wraps_errors_as_catastrophic(self, service):
        with pytest.raises(CatastrophicFailure):
            service._build_fallback_prompt(HostileText("owl"), PreferenceSet())


class TestCompletionRefinement:
    """Tests for the completion-enhanced path."""

    def test_completion_used_when_enabled(self, completion_service, fake_completion):
        result = completion_service.refine("a cute dog", {}, {"use_gpt": True})

        assert result.success is True
        assert result.metadata.method == "gpt-enhanced"
        assert result.refined_prompt.startswith(fake_completion.text)
        assert result.refined_prompt.endswith(STYLE_TAIL)
        assert "black-and-white line art" in result.refined_prompt
        assert result.detected_category == "domesticAnimals"

        assert len(fake_completion.requests) == 1
        request = fake_completion.requests[0]
        assert '"a cute dog"' in request.user_message
        assert "kids" in request.user_message

    def test_camel_case_option(self, completion_service):
        result = completion_service.refine("a cute dog", {}, {"useGPT": True})
        assert result.metadata.method == "gpt-enhanced"

    def test_options_model(self, completion_service):
        result = completion_service.refine("a cute dog", {}, RefinementOptions(use_gpt=True))
        assert result.metadata.method == "gpt-enhanced"

    def test_timeout_passed_through(self, completion_service, fake_completion):
        completion_service.refine("a cute dog", {}, {"use_gpt": True, "timeout": 2.5})
        assert fake_completion.timeouts == [2.5]

    def test_not_requested(self, completion_service, fake_completion):
        result = completion_service.refine("a cute dog", {})
        assert result.metadata.method == "template-based"
        assert fake_completion.requests == []

    def test_disabled_in_development(self, service, fake_completion):
        result = service.refine("a cute dog", {}, {"use_gpt": True})
        assert result.success is True
        assert result.metadata.method == "template-based"
        assert fake_completion.requests == []

    @pytest.mark.parametrize(
        "error",
        [ExternalServiceError("service down"), RuntimeError("socket closed"), TimeoutError()],
    )
    def test_failure_falls_back_to_templates(self, completion_config, completion_client_factory, error):
        client = completion_client_factory(error=error)
        service = PromptRefinementService(completion_config, completion_client=client)

        result = service.refine("a cute dog", {}, {"use_gpt": True})

        assert result.success is True
        assert result.metadata.method == "template-based"
        assert result.refined_prompt == service.template_engine.render("a cute dog", "domesticAnimals", PreferenceSet())
        assert len(client.requests) == 1

    def test_blank_completion_falls_back(self, completion_config, completion_client_factory):
        service = PromptRefinementService(completion_config, completion_client=completion_client_factory(text="  "))
        result = service.refine("a cute dog", {}, {"use_gpt": True})
        assert result.metadata.method == "template-based"

    def test_moderation_runs_before_completion(self, completion_service, fake_completion):
        result = completion_service.refine("a scary ghost", {}, {"use_gpt": True})
        assert result.success is False
        assert fake_completion.requests == []


class TestHealthCheck:
    """Tests for PromptRefinementService.health_check."""

    def test_development(self, service):
        health = service.health_check()
        assert health["status"] == "healthy"
        assert health["mode"] == "development"
        assert health["api_key"] == "mock"
        assert health["features"]["categories"] == 15
        assert health["features"]["enhancement_templates"] == 16
        assert health["features"]["completion_refinement"] is False

    def test_production_connected(self, completion_service):
        health = completion_service.health_check()
        assert health["status"] == "healthy"
        assert health["api_key"] == "configured"
        assert health["completion_connected"] is True
        assert health["models_available"] == 3

    def test_production_without_key(self, monkeypatch, fake_completion):
        monkeypatch.delenv("LINECRAFT_OPENAI_API_KEY", raising=False)
        cfg = LinecraftConfig(environment="production", _env_file=None)
        health = PromptRefinementService(cfg, completion_client=fake_completion).health_check()
        assert health["status"] == "healthy"
        assert health["api_key"] == "mock"
        assert health["completion_connected"] is False

    def test_model_listing_failure_is_unhealthy(self, completion_config, completion_client_factory):
        client = completion_client_factory(error=ExternalServiceError("unreachable"))
        health = PromptRefinementService(completion_config, completion_client=client).health_check()
        assert health["status"] == "unhealthy"
        assert health["error"] == "unreachable"
