"""Two-stage generation pipeline.

:class:`GenerationPipeline` decides, per request, whether the vision stage
runs, assembles the content description, calls the synthesis stage with the
right prompt family, and normalises the result.

Input Resolution
----------------
Each request is resolved once into exactly one input variant.  The first
matching rule wins::

    image present                  -> ImageDriven
    no image, prompt present       -> PromptOnly
    no image/prompt, text present  -> TextOnly
    nothing present                -> NoInput   (InvalidInput, no network call)

A field counts as present when it is a string with non-whitespace content.

Provenance
----------
``processed_with`` is derived from the variant that ran, not from the raw
request: ``"vision+synthesis"`` for :class:`ImageDriven`, ``"synthesis only"``
for everything else.  Because an extraction failure aborts the request, a
successful ``"vision+synthesis"`` result always means extraction succeeded.

Failure Policy
--------------
Stages run strictly in sequence.  Any :class:`PipelineError` from extraction
aborts before synthesis is called; any error from synthesis aborts the
request.  Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol, Union

from sketchsynth.core.errors import ErrorKind, PipelineError
from sketchsynth.core.normalizer import normalize_html, strip_code_fences
from sketchsynth.core.prompts import (
    ExtractionMode,
    build_answer_messages,
    build_code_messages,
    build_diagram_messages,
)
from sketchsynth.core.synthesis import SynthesisClient
from sketchsynth.core.vision import VisionExtractionClient

logger = logging.getLogger(__name__)

VISION_AND_SYNTHESIS = "vision+synthesis"
SYNTHESIS_ONLY = "synthesis only"

NO_CONTEXT_PLACEHOLDER = "No specific context."
ADDITIONAL_TEXT_HEADER = "Additional text information:"
ADDITIONAL_INSTRUCTIONS_HEADER = "Additional instructions:"
CODE_FROM_TEXT_TEMPLATE = "Build a user interface from the following text description: {text}"

MISSING_CODE_INPUT = "Please provide an image or a text description for code generation"
MISSING_ANSWER_INPUT = "Please provide an image, a text description or a question"

DIAGRAM_PROMPT_MIN = 3
DIAGRAM_PROMPT_MAX = 1000


class GenerationInput(Protocol):
    """Anything exposing the four optional request fields."""

    text: str | None
    image: str | None
    theme: str | None
    prompt: str | None


# ---------------------------------------------------------------------------
# Input variants.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoInput:
    """None of image, text or prompt was supplied."""


@dataclass(frozen=True)
class TextOnly:
    text: str


@dataclass(frozen=True)
class PromptOnly:
    prompt: str
    text: str | None = None


@dataclass(frozen=True)
class ImageDriven:
    image: str
    text: str | None = None
    prompt: str | None = None


ResolvedInput = Union[NoInput, TextOnly, PromptOnly, ImageDriven]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful pipeline run.

    Attributes:
        flow: ``"code"`` when ``content`` is HTML, ``"text"`` for answers.
        content: The normalised HTML document or the answer text.
        processed_with: Provenance tag.
    """

    flow: Literal["code", "text"]
    content: str
    processed_with: str

    def to_body(self) -> dict[str, str]:
        key = "html" if self.flow == "code" else "text"
        return {key: self.content, "processedWith": self.processed_with}


def _present(value: str | None) -> str | None:
    """Return *value* when it holds non-whitespace text, else ``None``."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def resolve_input(request: GenerationInput) -> ResolvedInput:
    """Resolve a request into exactly one input variant.

    Args:
        request: Object exposing ``text``, ``image`` and ``prompt``.

    Returns:
        The first matching variant, in priority order image, prompt, text.
    """
    image = _present(request.image)
    text = _present(request.text)
    prompt = _present(request.prompt)

    if image is not None:
        return ImageDriven(image=image, text=text, prompt=prompt)
    if prompt is not None:
        return PromptOnly(prompt=prompt, text=text)
    if text is not None:
        return TextOnly(text=text)
    return NoInput()


def _with_block(description: str, header: str, body: str | None) -> str:
    """Append ``header`` + ``body`` to *description* when *body* is given."""
    if not body:
        return description
    return f"{description}\n\n{header} {body}"


def _describe_request(request: GenerationInput) -> None:
    image = request.image or ""
    logger.info(
        "Request: has_text=%s text_len=%d has_image=%s image_prefix=%r has_prompt=%s theme=%s",
        bool(request.text),
        len(request.text or ""),
        bool(image),
        image[:30],
        bool(request.prompt),
        request.theme or "(default)",
    )


class GenerationPipeline:
    """Orchestrates the extraction and synthesis stages.

    The pipeline holds no per-request state; one instance serves every
    request for the lifetime of the application.

    Attributes:
        vision: Client for the extraction stage.
        synthesis: Client for the synthesis stage.
        diagram_max_tokens: Output budget for Mermaid diagrams.
    """

    def __init__(
        self,
        vision: VisionExtractionClient,
        synthesis: SynthesisClient,
        *,
        diagram_max_tokens: int = 1500,
    ) -> None:
        self.vision = vision
        self.synthesis = synthesis
        self.diagram_max_tokens = diagram_max_tokens

    # -- Code flow ----------------------------------------------------------

    def generate_code(self, request: GenerationInput) -> GenerationResult:
        """Produce a standalone HTML document from an image and/or text.

        Args:
            request: The generation request.

        Returns:
            A ``"code"`` result holding the normalised document.

        Raises:
            PipelineError: ``InvalidInput`` when nothing usable was supplied,
                otherwise whatever the extraction or synthesis stage raised.
        """
        _describe_request(request)
        resolved = resolve_input(request)
        logger.info("Code flow resolved input as %s.", type(resolved).__name__)

        if isinstance(resolved, ImageDriven):
            description = self.vision.extract(resolved.image, ExtractionMode.UI_STRUCTURE)
            description = _with_block(description, ADDITIONAL_TEXT_HEADER, resolved.text)
            description = _with_block(
                description, ADDITIONAL_INSTRUCTIONS_HEADER, resolved.prompt
            )
            texts = resolved.text
            processed_with = VISION_AND_SYNTHESIS
        elif isinstance(resolved, PromptOnly):
            if resolved.text:
                description = CODE_FROM_TEXT_TEMPLATE.format(text=resolved.text)
                description = _with_block(
                    description, ADDITIONAL_INSTRUCTIONS_HEADER, resolved.prompt
                )
            else:
                description = CODE_FROM_TEXT_TEMPLATE.format(text=resolved.prompt)
            texts = resolved.text
            processed_with = SYNTHESIS_ONLY
        elif isinstance(resolved, TextOnly):
            description = CODE_FROM_TEXT_TEMPLATE.format(text=resolved.text)
            texts = resolved.text
            processed_with = SYNTHESIS_ONLY
        else:
            raise PipelineError(ErrorKind.INVALID_INPUT, MISSING_CODE_INPUT)

        logger.info("Content description length: %d.", len(description))
        raw = self.synthesis.complete(build_code_messages(description, texts, request.theme))
        html = normalize_html(raw)
        logger.info("Generated HTML length: %d.", len(html))
        logger.debug("HTML preview: %s", html[:200])
        return GenerationResult(flow="code", content=html, processed_with=processed_with)

    # -- Answer flow --------------------------------------------------------

    def answer_question(self, request: GenerationInput) -> GenerationResult:
        """Answer a question about an image and/or text, or summarise it.

        Args:
            request: The generation request; ``prompt`` is the question.

        Returns:
            A ``"text"`` result holding the answer.

        Raises:
            PipelineError: ``InvalidInput`` when nothing usable was supplied,
                otherwise whatever the extraction or synthesis stage raised.
        """
        _describe_request(request)
        resolved = resolve_input(request)
        logger.info("Answer flow resolved input as %s.", type(resolved).__name__)

        question: str | None
        if isinstance(resolved, ImageDriven):
            description = self.vision.extract(resolved.image, ExtractionMode.FACTS)
            description = _with_block(description, ADDITIONAL_TEXT_HEADER, resolved.text)
            question = resolved.prompt
            processed_with = VISION_AND_SYNTHESIS
        elif isinstance(resolved, PromptOnly):
            description = resolved.text or NO_CONTEXT_PLACEHOLDER
            question = resolved.prompt
            processed_with = SYNTHESIS_ONLY
        elif isinstance(resolved, TextOnly):
            description = resolved.text
            question = None
            processed_with = SYNTHESIS_ONLY
        else:
            raise PipelineError(ErrorKind.INVALID_INPUT, MISSING_ANSWER_INPUT)

        logger.info(
            "Content description length: %d, question: %s.",
            len(description),
            "yes" if question else "none",
        )
        answer = self.synthesis.complete(build_answer_messages(description, question))
        logger.info("Generated answer length: %d.", len(answer))
        return GenerationResult(flow="text", content=answer, processed_with=processed_with)

    # -- Text-to-diagram ----------------------------------------------------

    def generate_diagram(self, prompt: str | None) -> str:
        """Turn a natural-language description into Mermaid code.

        Single-stage: the vision model is never called.

        Args:
            prompt: Diagram description; at least 3 characters after trimming
                and at most 1000 characters as sent.

        Returns:
            Mermaid source with any code fences removed.

        Raises:
            PipelineError: ``InvalidInput`` for a missing, too short or too
                long prompt; otherwise whatever the synthesis stage raised.
        """
        cleaned = (prompt or "").strip()
        if len(cleaned) < DIAGRAM_PROMPT_MIN:
            raise PipelineError(
                ErrorKind.INVALID_INPUT,
                f"Prompt is too short (minimum {DIAGRAM_PROMPT_MIN} characters)",
            )
        if len(prompt) > DIAGRAM_PROMPT_MAX:
            raise PipelineError(
                ErrorKind.INVALID_INPUT,
                f"Prompt is too long (maximum {DIAGRAM_PROMPT_MAX} characters)",
            )

        logger.info("Generating Mermaid diagram (prompt length %d).", len(cleaned))
        raw = self.synthesis.complete(
            build_diagram_messages(cleaned),
            max_tokens=self.diagram_max_tokens,
        )
        return strip_code_fences(raw)
