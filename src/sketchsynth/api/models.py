"""Pydantic request and response models for the Sketchsynth API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for request validation, serialisation, and OpenAPI documentation.

Models
------
GenerationRequest
    Payload for the two-stage endpoints (diagram-to-code, diagram-to-text).
    Every field is optional; which ones are present decides the pipeline
    branch.
DiagramRequest
    Payload for ``POST /v1/ai/text-to-diagram/generate``.
CodeResponse / TextResponse / DiagramResponse
    Success bodies.
ErrorResponse / RateLimitResponse
    Failure bodies, documented for OpenAPI.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """Request body for the two-stage generation endpoints.

    Attributes:
        text: Free text.  For code generation it describes the UI or lists
            literal text to embed; for answers it is context.  Also accepted
            as ``texts``.
        image: Data-URI encoded raster image of a sketch or screenshot.
        theme: Visual theme hint for code generation (default ``light``).
        prompt: The user's question or instruction.  Also accepted as
            ``question``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("text", "texts"),
        description="Free text description or literal text to embed.",
    )
    image: str | None = Field(
        default=None,
        description="Image as a data URI (e.g. 'data:image/png;base64,...').",
    )
    theme: str | None = Field(
        default=None,
        description="Theme hint for generated code, e.g. 'light' or 'dark'.",
    )
    prompt: str | None = Field(
        default=None,
        validation_alias=AliasChoices("prompt", "question"),
        description="Question or instruction from the user.",
    )


class DiagramRequest(BaseModel):
    """Request body for ``POST /v1/ai/text-to-diagram/generate``."""

    model_config = ConfigDict(extra="ignore")

    prompt: str | None = Field(
        default=None,
        description="Natural-language description of the diagram (3-1000 characters).",
    )


class CodeResponse(BaseModel):
    """Success body of the diagram-to-code endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    html: str
    processed_with: str = Field(alias="processedWith")


class TextResponse(BaseModel):
    """Success body of the diagram-to-text endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    processed_with: str = Field(alias="processedWith")


class DiagramResponse(BaseModel):
    """Success body of the text-to-diagram endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    generated_response: str = Field(alias="generatedResponse")


class ErrorResponse(BaseModel):
    """Body for 400 and 500 responses."""

    error: str


class RateLimitResponse(BaseModel):
    """Body for 429 responses."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(default=429, alias="statusCode")
    message: str
