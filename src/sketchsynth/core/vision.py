"""Vision extraction client: image in, textual description out.

The extraction stage sends an uploaded image to a multimodal model together
with one of the constant extraction prompts from
:mod:`sketchsynth.core.prompts` and returns the model's description.

Any failure (transport, timeout, any non-2xx status, malformed body) is an
``UpstreamFailure``; a blank description is ``UpstreamEmpty``.  Unlike the
synthesis stage, a 429 here is not singled out.
"""

from __future__ import annotations

import logging

from sketchsynth.core.chat_client import ChatCompletionClient
from sketchsynth.core.errors import ErrorKind, PipelineError
from sketchsynth.core.prompts import ExtractionMode, build_extraction_messages

logger = logging.getLogger(__name__)


class VisionExtractionClient(ChatCompletionClient):
    """Client for the multimodal extraction model.

    The response text is read from ``reasoning_content`` first and
    ``content`` second (see :func:`~sketchsynth.core.chat_client.select_message_text`).
    """

    prefer_reasoning = True
    failure_message = "Image content extraction failed"
    empty_message = "Image content extraction returned no content"

    def extract(self, image: str, mode: ExtractionMode = ExtractionMode.UI_STRUCTURE) -> str:
        """Describe *image* according to *mode*.

        Args:
            image: Data URI of the image.  Content is not validated.
            mode: Extraction prompt to use.

        Returns:
            The non-empty description produced by the model.

        Raises:
            PipelineError: ``InvalidInput`` for an empty image (no network
                call is made), otherwise ``UpstreamFailure`` or
                ``UpstreamEmpty``.
        """
        if not image:
            raise PipelineError(ErrorKind.INVALID_INPUT, "An image is required for extraction")

        logger.info("Extracting image content (mode=%s).", ExtractionMode(mode).value)
        description = self.create_completion(build_extraction_messages(image, mode))
        logger.debug("Extracted description: %s", description)
        return description
