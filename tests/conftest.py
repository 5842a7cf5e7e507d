"""Shared pytest fixtures for Sketchsynth tests.

Upstream providers are replaced by :class:`FakeUpstream`, a scripted
``httpx.MockTransport`` handler that records every request it receives.
Tests can therefore assert on call counts, call order and payloads without
any network access.

Tests reach the helpers through the ``make_upstream``, ``completion`` and
``sample_image`` fixtures.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from sketchsynth.api.main import app
from sketchsynth.core.config import ProviderSettings
from sketchsynth.core.pipeline import GenerationPipeline
from sketchsynth.core.synthesis import SynthesisClient
from sketchsynth.core.vision import VisionExtractionClient

SAMPLE_IMAGE = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9pQn2wAAAABJRU5ErkJggg=="
)


def build_completion(
    content: str | None = None,
    reasoning: str | None = None,
    status: int = 200,
) -> httpx.Response:
    """Build a chat-completion response.

    Args:
        content: Value of ``message.content`` (omitted when ``None``).
        reasoning: Value of ``message.reasoning_content`` (omitted when ``None``).
        status: HTTP status code.

    Returns:
        An ``httpx.Response`` suitable for :class:`FakeUpstream`.
    """
    message: dict[str, Any] = {"role": "assistant"}
    if content is not None:
        message["content"] = content
    if reasoning is not None:
        message["reasoning_content"] = reasoning
    return httpx.Response(status, json={"choices": [{"index": 0, "message": message}]})


class FakeUpstream:
    """Scripted chat-completions endpoint.

    Each incoming request consumes the next scripted outcome: an
    ``httpx.Response`` is returned, an exception is raised.  A request with
    nothing left to consume fails the test.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        self._outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._outcomes:
            raise AssertionError(f"Unexpected upstream call to {request.url}")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.Client:
        """Return an ``httpx.Client`` routed to this fake."""
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def sample_image() -> str:
    """A 1x1 PNG encoded as a data URI."""
    return SAMPLE_IMAGE


@pytest.fixture
def completion() -> Callable[..., httpx.Response]:
    """Builder for chat-completion responses (see :func:`build_completion`)."""
    return build_completion


@pytest.fixture
def make_upstream() -> Callable[..., FakeUpstream]:
    """Factory for scripted upstreams: ``make_upstream(*outcomes)``."""
    return FakeUpstream


@pytest.fixture
def vision_settings() -> ProviderSettings:
    """Provider settings for the fake vision endpoint."""
    return ProviderSettings(
        name="vision",
        base_url="https://vision.test/api/v1",
        api_key="vision-key",
        model="intern-s1",
        timeout=120.0,
        temperature=0.3,
        max_tokens=32000,
    )


@pytest.fixture
def synthesis_settings() -> ProviderSettings:
    """Provider settings for the fake synthesis endpoint."""
    return ProviderSettings(
        name="synthesis",
        base_url="https://synthesis.test/",
        api_key="synthesis-key",
        model="deepseek-chat",
        timeout=60.0,
        temperature=0.7,
        max_tokens=8000,
    )


@pytest.fixture
def make_pipeline(
    vision_settings: ProviderSettings,
    synthesis_settings: ProviderSettings,
) -> Callable[[FakeUpstream, FakeUpstream], GenerationPipeline]:
    """Factory building a pipeline wired to two fake upstreams."""

    def _make(vision: FakeUpstream, synthesis: FakeUpstream) -> GenerationPipeline:
        return GenerationPipeline(
            VisionExtractionClient(vision_settings, vision.client()),
            SynthesisClient(synthesis_settings, synthesis.client()),
            diagram_max_tokens=1500,
        )

    return _make


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """TestClient with the application lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def install_pipeline(
    test_client: TestClient,
    make_pipeline: Callable[[FakeUpstream, FakeUpstream], GenerationPipeline],
) -> Callable[[FakeUpstream, FakeUpstream], None]:
    """Replace ``app.state.pipeline`` with one wired to fake upstreams."""

    def _install(vision: FakeUpstream, synthesis: FakeUpstream) -> None:
        app.state.pipeline = make_pipeline(vision, synthesis)

    return _install
