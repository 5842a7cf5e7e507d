"""Synthesis client: description in, HTML / answer / diagram text out.

The client is prompt-agnostic.  The orchestrator decides the task by choosing
a message builder from :mod:`sketchsynth.core.prompts` and hands the result
to :meth:`SynthesisClient.complete`.

A 429 from the provider is the one status code singled out: it becomes a
``RateLimited`` error with a fixed, user-facing message so the caller can back
off.  Everything else follows :class:`~sketchsynth.core.chat_client.ChatCompletionClient`.
"""

from __future__ import annotations

from typing import Any

from sketchsynth.core.chat_client import ChatCompletionClient
from sketchsynth.core.errors import RATE_LIMITED_MESSAGE, ErrorKind, PipelineError


class SynthesisClient(ChatCompletionClient):
    """Client for the text-only synthesis model."""

    prefer_reasoning = False
    failure_message = "Synthesis model request failed"
    empty_message = "Synthesis model returned empty content"

    def _status_error(self, status_code: int) -> PipelineError:
        if status_code == 429:
            return PipelineError(ErrorKind.RATE_LIMITED, RATE_LIMITED_MESSAGE)
        return super()._status_error(status_code)

    def complete(self, messages: list[dict[str, Any]], *, max_tokens: int | None = None) -> str:
        """Return the raw generated text for *messages*.

        Args:
            messages: A ``[system, user]`` pair from one of the prompt builders.
            max_tokens: Output budget; defaults to the provider setting.

        Raises:
            PipelineError: ``RateLimited``, ``UpstreamFailure`` or
                ``UpstreamEmpty``.
        """
        return self.create_completion(messages, max_tokens=max_tokens)
