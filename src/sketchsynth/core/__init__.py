"""Core functionality for the generation pipeline.

This package holds everything below the HTTP layer:

- **config**: Pydantic Settings configuration and per-provider settings
- **errors**: the four-kind error taxonomy and its HTTP mapping
- **chat_client**: shared OpenAI-compatible chat-completion transport
- **vision**: extraction stage (image → description)
- **synthesis**: synthesis stage (description → HTML / answer / diagram)
- **prompts**: system prompts and message builders
- **normalizer**: fence stripping and HTML document shell
- **pipeline**: the orchestrator tying the stages together

Usage Example
-------------
::

    from sketchsynth.core import GenerationPipeline, SynthesisClient, VisionExtractionClient, config

    pipeline = GenerationPipeline(
        VisionExtractionClient(config.vision_provider()),
        SynthesisClient(config.synthesis_provider()),
    )
    result = pipeline.answer_question(request)
"""

from sketchsynth.core.config import ProviderSettings, SketchsynthConfig, config
from sketchsynth.core.errors import ErrorKind, PipelineError, classify_error
from sketchsynth.core.pipeline import GenerationPipeline, GenerationResult
from sketchsynth.core.synthesis import SynthesisClient
from sketchsynth.core.vision import VisionExtractionClient

__all__ = [
    "ErrorKind",
    "GenerationPipeline",
    "GenerationResult",
    "PipelineError",
    "ProviderSettings",
    "SketchsynthConfig",
    "SynthesisClient",
    "VisionExtractionClient",
    "classify_error",
    "config",
]
