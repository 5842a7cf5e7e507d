"""Shared HTTP transport for OpenAI-compatible chat-completion providers.

Both pipeline stages talk to the same kind of endpoint::

    POST {base_url}/chat/completions
    Authorization: Bearer <api_key>

    {"model": ..., "messages": [...], "max_tokens": ..., "temperature": ...}

and receive ``{"choices": [{"message": {"content": ..., "reasoning_content": ...}}]}``.
:class:`ChatCompletionClient` owns that round trip and turns every way it can
go wrong into a :class:`~sketchsynth.core.errors.PipelineError`:

- network errors and timeouts → ``UpstreamFailure``
- non-2xx responses → ``UpstreamFailure`` (subclasses may refine specific
  status codes through :meth:`ChatCompletionClient._status_error`)
- bodies without ``choices[0].message`` → ``UpstreamFailure``
- an empty or whitespace-only selected text → ``UpstreamEmpty``

There are no retries: one call, one outcome.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sketchsynth.core.config import ProviderSettings
from sketchsynth.core.errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)


def select_message_text(message: dict[str, Any], *, prefer_reasoning: bool) -> str | None:
    """Pick the generated text out of a completion message.

    Some providers (notably reasoning-capable multimodal models) return the
    useful output in ``reasoning_content`` and leave ``content`` empty or
    short.  When *prefer_reasoning* is set, a non-empty ``reasoning_content``
    wins; otherwise, or when it is missing or empty, ``content`` is used.

    This is the single place that knows about the quirk.  If a provider
    changes its response schema, extraction silently returning ``None`` here
    surfaces as ``UpstreamEmpty`` rather than as a wrong answer.

    Args:
        message: The ``choices[0].message`` object of a completion.
        prefer_reasoning: Whether ``reasoning_content`` takes precedence.

    Returns:
        The selected text, or ``None`` when neither field holds a string.
    """
    if prefer_reasoning:
        reasoning = message.get("reasoning_content")
        if isinstance(reasoning, str) and reasoning:
            return reasoning
    content = message.get("content")
    return content if isinstance(content, str) else None


class ChatCompletionClient:
    """Synchronous client for one chat-completion provider.

    Attributes:
        provider: Immutable connection and sampling settings.
        prefer_reasoning: Passed to :func:`select_message_text`.
        failure_message: Message used for ``UpstreamFailure`` errors.
        empty_message: Message used for ``UpstreamEmpty`` errors.
    """

    prefer_reasoning: bool = False
    failure_message: str = "Model request failed"
    empty_message: str = "Model returned empty content"

    def __init__(
        self,
        provider: ProviderSettings,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            provider: Settings for the provider this client talks to.
            http_client: Optional shared ``httpx.Client``.  Tests pass one
                built on ``httpx.MockTransport``; when omitted a private
                client is created and closed by :meth:`close`.
        """
        self.provider = provider
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    # -- Request ------------------------------------------------------------

    def _build_payload(self, messages: list[dict[str, Any]], max_tokens: int | None) -> dict:
        return {
            "model": self.provider.model,
            "messages": messages,
            "max_tokens": max_tokens or self.provider.max_tokens,
            "temperature": self.provider.temperature,
        }

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.provider.api_key}",
            "Content-Type": "application/json",
        }

    def _status_error(self, status_code: int) -> PipelineError:
        """Return the error for a non-2xx response.

        Subclasses override this to distinguish specific status codes.
        """
        return PipelineError(ErrorKind.UPSTREAM_FAILURE, self.failure_message)

    def _post(self, payload: dict) -> dict[str, Any]:
        """Send one completion request and return ``choices[0].message``."""
        try:
            response = self._http.post(
                self.provider.completions_url,
                json=payload,
                headers=self._headers(),
                timeout=self.provider.timeout,
            )
        except httpx.TimeoutException:
            logger.error(
                "%s provider timed out after %.0fs.", self.provider.name, self.provider.timeout
            )
            raise PipelineError(ErrorKind.UPSTREAM_FAILURE, self.failure_message) from None
        except httpx.HTTPError as exc:
            logger.error("%s provider request error: %s", self.provider.name, exc)
            raise PipelineError(ErrorKind.UPSTREAM_FAILURE, self.failure_message) from None

        if not response.is_success:
            logger.error(
                "%s provider returned HTTP %d.", self.provider.name, response.status_code
            )
            raise self._status_error(response.status_code)

        try:
            return response.json()["choices"][0]["message"]
        except (ValueError, KeyError, IndexError, TypeError):
            logger.error("%s provider returned a malformed completion body.", self.provider.name)
            raise PipelineError(ErrorKind.UPSTREAM_FAILURE, self.failure_message) from None

    def create_completion(
        self,
        messages: list[dict[str, Any]],
        *,
        max_tokens: int | None = None,
    ) -> str:
        """Run one completion and return the selected, non-empty text.

        Args:
            messages: The system + user message pair.
            max_tokens: Output budget; defaults to the provider setting.

        Returns:
            The generated text, untrimmed.

        Raises:
            PipelineError: ``UpstreamFailure`` for transport, status or
                schema problems; ``UpstreamEmpty`` for blank output; whatever
                :meth:`_status_error` returns for non-2xx responses.
        """
        payload = self._build_payload(messages, max_tokens)
        logger.debug(
            "Calling %s provider (model=%s, max_tokens=%d).",
            self.provider.name,
            self.provider.model,
            payload["max_tokens"],
        )
        message = self._post(payload)
        if not isinstance(message, dict):
            raise PipelineError(ErrorKind.UPSTREAM_FAILURE, self.failure_message)

        text = select_message_text(message, prefer_reasoning=self.prefer_reasoning)
        if not text or not text.strip():
            logger.error("%s provider returned empty content.", self.provider.name)
            raise PipelineError(ErrorKind.UPSTREAM_EMPTY, self.empty_message)

        logger.info("%s provider returned %d characters.", self.provider.name, len(text))
        return text
