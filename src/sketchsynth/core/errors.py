"""Error taxonomy and classification for the generation pipeline.

Every failure inside the pipeline is raised as a :class:`PipelineError`
carrying one of four :class:`ErrorKind` values.  The kind alone decides the
HTTP status and the shape of the JSON body, so the route layer never has to
inspect upstream responses itself.

==================  ======  =========================================
Kind                Status  Body
==================  ======  =========================================
``InvalidInput``    400     ``{"error": message}``
``RateLimited``     429     ``{"statusCode": 429, "message": message}``
``UpstreamEmpty``   500     ``{"error": message}``
``UpstreamFailure`` 500     ``{"error": message}``
==================  ======  =========================================

Anything that is not a ``PipelineError`` is folded into a generic
``UpstreamFailure`` by :func:`classify_error`, so tracebacks and raw upstream
bodies never reach the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

GENERIC_FAILURE_MESSAGE = "Generation failed"
RATE_LIMITED_MESSAGE = "Synthesis API rate limit exceeded, please try again later!"


class ErrorKind(str, Enum):
    """The four failure categories a request can end in."""

    INVALID_INPUT = "InvalidInput"
    RATE_LIMITED = "RateLimited"
    UPSTREAM_EMPTY = "UpstreamEmpty"
    UPSTREAM_FAILURE = "UpstreamFailure"


_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.UPSTREAM_EMPTY: 500,
    ErrorKind.UPSTREAM_FAILURE: 500,
}


class PipelineError(Exception):
    """A classified pipeline failure.

    Instances are created where the failure is detected (a client or the
    orchestrator) and are read-only afterwards: ``kind`` and ``message`` are
    exposed through properties only.

    Args:
        kind: Failure category.
        message: User-facing message placed in the response body.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self._kind = ErrorKind(kind)
        self._message = message

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self._kind]

    def to_body(self) -> dict[str, Any]:
        """Return the JSON body for this error."""
        if self._kind is ErrorKind.RATE_LIMITED:
            return {"statusCode": self.http_status, "message": self._message}
        return {"error": self._message}

    def __repr__(self) -> str:
        return f"PipelineError(kind={self._kind.value!r}, message={self._message!r})"


def classify_error(exc: BaseException) -> PipelineError:
    """Map any exception onto the pipeline taxonomy.

    A :class:`PipelineError` is returned unchanged.  Anything else is an
    unexpected failure and becomes an ``UpstreamFailure`` with a generic
    message; the original exception text is dropped.

    Args:
        exc: The exception caught at the route boundary.

    Returns:
        The classified error.
    """
    if isinstance(exc, PipelineError):
        return exc
    return PipelineError(ErrorKind.UPSTREAM_FAILURE, GENERIC_FAILURE_MESSAGE)
