"""Tests for sketchsynth.api.models — Pydantic request/response models.

Tests cover:
- All request fields are optional.
- Legacy ``texts`` / ``question`` keys.
- Response aliases used on the wire.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sketchsynth.api.models import (
    CodeResponse,
    DiagramRequest,
    DiagramResponse,
    GenerationRequest,
    RateLimitResponse,
    TextResponse,
)


class TestGenerationRequest:
    """Test GenerationRequest Pydantic model."""

    def test_empty_request_is_valid(self):
        """Every field is optional; the pipeline decides what is missing."""
        req = GenerationRequest()
        assert req.text is None
        assert req.image is None
        assert req.theme is None
        assert req.prompt is None

    def test_all_fields(self):
        req = GenerationRequest.model_validate(
            {"text": "t", "image": "data:image/png;base64,AA", "theme": "dark", "prompt": "q"}
        )
        assert req.text == "t"
        assert req.image == "data:image/png;base64,AA"
        assert req.theme == "dark"
        assert req.prompt == "q"

    def test_texts_alias(self):
        req = GenerationRequest.model_validate({"texts": "Sign in"})
        assert req.text == "Sign in"

    def test_question_alias(self):
        req = GenerationRequest.model_validate({"question": "What is shown?"})
        assert req.prompt == "What is shown?"

    def test_unknown_fields_ignored(self):
        req = GenerationRequest.model_validate({"text": "t", "model": "gpt"})
        assert req.text == "t"

    def test_non_string_text_rejected(self):
        with pytest.raises(ValidationError):
            GenerationRequest.model_validate({"text": ["a", "b"]})


class TestDiagramRequest:
    def test_prompt_optional(self):
        assert DiagramRequest().prompt is None

    def test_prompt(self):
        assert DiagramRequest(prompt="a flow").prompt == "a flow"


class TestResponses:
    """Response models serialise with camelCase aliases."""

    def test_code_response(self):
        body = CodeResponse(html="<html></html>", processed_with="synthesis only")
        assert body.model_dump(by_alias=True) == {
            "html": "<html></html>",
            "processedWith": "synthesis only",
        }

    def test_text_response(self):
        body = TextResponse(text="hi", processed_with="vision+synthesis")
        assert body.model_dump(by_alias=True)["processedWith"] == "vision+synthesis"

    def test_diagram_response(self):
        body = DiagramResponse(generated_response="flowchart TD")
        assert body.model_dump(by_alias=True) == {"generatedResponse": "flowchart TD"}

    def test_rate_limit_default_status(self):
        body = RateLimitResponse(message="slow down")
        assert body.model_dump(by_alias=True) == {"statusCode": 429, "message": "slow down"}
