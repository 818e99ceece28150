"""Shared pytest fixtures for Linecraft tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from linecraft.core.completion import CompletionRequest
from linecraft.core.config import LinecraftConfig
from linecraft.core.refinement import PromptRefinementService

REAL_LOOKING_KEY = "sk-test-0123456789abcdef"


class FakeCompletionClient:
    """Completion client double that records requests.

    Returns ``text`` for every call, or raises ``error`` when one is set.
    """

    def __init__(self, text: str = "a cheerful puppy sitting in a garden", error: Exception | None = None):
        self.text = text
        self.error = error
        self.requests: list[CompletionRequest] = []
        self.timeouts: list[float | None] = []
        self.models = 3

    def complete(self, request: CompletionRequest, timeout: float | None = None) -> str:
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.text

    def list_models(self, timeout: float | None = None) -> int:
        if self.error is not None:
            raise self.error
        return self.models


@pytest.fixture
def test_config(monkeypatch) -> LinecraftConfig:
    """Configuration with completions disabled (development mode).

    Returns:
        LinecraftConfig instance for testing
    """
    monkeypatch.delenv("LINECRAFT_OPENAI_API_KEY", raising=False)
    return LinecraftConfig(environment="development", _env_file=None)


@pytest.fixture
def completion_config(monkeypatch) -> LinecraftConfig:
    """Configuration with completions enabled.

    Returns:
        LinecraftConfig instance in production mode with a real-looking key
    """
    monkeypatch.delenv("LINECRAFT_OPENAI_API_KEY", raising=False)
    return LinecraftConfig(
        environment="production",
        openai_api_key=REAL_LOOKING_KEY,
        openai_base_url="https://completions.test/v1",
        completion_timeout=5,
        _env_file=None,
    )


@pytest.fixture
def fake_completion() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def service(test_config: LinecraftConfig, fake_completion: FakeCompletionClient) -> PromptRefinementService:
    """Refinement service that always takes the template path."""
    return PromptRefinementService(test_config, completion_client=fake_completion)


@pytest.fixture
def completion_service(
    completion_config: LinecraftConfig, fake_completion: FakeCompletionClient
) -> PromptRefinementService:
    """Refinement service with the completion path enabled and stubbed."""
    return PromptRefinementService(completion_config, completion_client=fake_completion)


@pytest.fixture
def test_client(service: PromptRefinementService) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the template-only ``service`` fixture.

    Cleanup:
        The injected service is removed from ``app.state`` afterwards.
    """
    from linecraft.api.main import app

    app.state.refinement_service = service
    try:
        with TestClient(app) as client:
            yield client
    finally:
        del app.state.refinement_service


@pytest.fixture
def completion_client_factory() -> type[FakeCompletionClient]:
    """The fake client class, for tests that need custom text or errors."""
    return FakeCompletionClient
