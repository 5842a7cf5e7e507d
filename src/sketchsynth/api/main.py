"""Sketchsynth — FastAPI Application.

This module is the single entry point for the web service.  It defines the
FastAPI ``app`` instance, the REST routes, and the ``main()`` CLI function
that launches the uvicorn server.

Architecture
------------
The application is a thin, stateless adapter around
:class:`~sketchsynth.core.pipeline.GenerationPipeline`:

- **Configuration** comes from :data:`~sketchsynth.core.config.config`
  (``SKETCHSYNTH_*`` environment variables).
- **Upstream clients** are created once in the lifespan handler, stored on
  ``app.state.pipeline`` and closed on shutdown.  They hold connection pools
  only, no request state.
- **Errors** are raised as :class:`~sketchsynth.core.errors.PipelineError`
  anywhere below this module and turned into responses here, and only here.
- **CORS** headers are attached to every response by a small HTTP middleware;
  every generation route also answers ``OPTIONS`` with 200 and no body.

Endpoints
---------
=======  ====================================  ==================================
Method   Path                                  Purpose
=======  ====================================  ==================================
GET      ``/health``                           Service status
POST     ``/v1/ai/diagram-to-code/generate``   Image and/or text → HTML document
POST     ``/v1/ai/diagram-to-text/generate``   Image and/or text → answer text
POST     ``/v1/ai/text-to-diagram/generate``   Description → Mermaid code
=======  ====================================  ==================================

Usage
-----
CLI (installed entry point)::

    sketchsynth

Direct invocation::

    python -m sketchsynth.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sketchsynth import __version__
from sketchsynth.api.models import (
    CodeResponse,
    DiagramRequest,
    DiagramResponse,
    ErrorResponse,
    GenerationRequest,
    RateLimitResponse,
    TextResponse,
)
from sketchsynth.core.config import SketchsynthConfig, config
from sketchsynth.core.errors import ErrorKind, PipelineError, classify_error
from sketchsynth.core.pipeline import GenerationPipeline
from sketchsynth.core.synthesis import SynthesisClient
from sketchsynth.core.vision import VisionExtractionClient

logger = logging.getLogger(__name__)

CODE_ROUTE = "/v1/ai/diagram-to-code/generate"
TEXT_ROUTE = "/v1/ai/diagram-to-text/generate"
DIAGRAM_ROUTE = "/v1/ai/text-to-diagram/generate"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    429: {"model": RateLimitResponse, "description": "Synthesis provider rate limited"},
    500: {"model": ErrorResponse, "description": "Upstream failure or empty output"},
}


def build_pipeline(settings: SketchsynthConfig) -> GenerationPipeline:
    """Create a pipeline with one client per configured provider.

    Args:
        settings: Application configuration.

    Returns:
        A ready-to-use :class:`GenerationPipeline`.
    """
    return GenerationPipeline(
        VisionExtractionClient(settings.vision_provider()),
        SynthesisClient(settings.synthesis_provider()),
        diagram_max_tokens=settings.diagram_max_tokens,
    )


# ---------------------------------------------------------------------------
# Application lifecycle — upstream client setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the pipeline on startup and close its HTTP clients on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    pipeline = build_pipeline(config)
    app.state.pipeline = pipeline
    if not config.vision_api_key or not config.synthesis_api_key:
        logger.warning("One or both provider API keys are empty; upstream calls will be rejected.")
    logger.info(
        "Pipeline initialised (vision=%s, synthesis=%s).",
        config.vision_model,
        config.synthesis_model,
    )

    yield

    pipeline.vision.close()
    pipeline.synthesis.close()
    logger.info("Upstream clients closed on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Sketchsynth",
    description="Turns UI sketches and text into HTML, answers and Mermaid diagrams.",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach the fixed CORS headers to every response."""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as ``InvalidInput`` (400)."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.warning("Rejected malformed request to %s: %s", request.url.path, details)
    error = PipelineError(ErrorKind.INVALID_INPUT, f"Invalid request body: {details}")
    return JSONResponse(status_code=error.http_status, content=error.to_body())


# ---------------------------------------------------------------------------
# Route adapter.
# ---------------------------------------------------------------------------


def _respond(run: Callable[[], dict]) -> JSONResponse:
    """Run a pipeline operation and serialise its result or error.

    This is the only place where pipeline failures become HTTP responses.
    Unexpected exceptions are logged with their traceback and reported as a
    generic ``UpstreamFailure``.

    Args:
        run: Zero-argument callable returning the success body.

    Returns:
        A JSON response with the success body or the classified error.
    """
    try:
        body = run()
    except PipelineError as exc:
        logger.warning("Request failed: %s (%s).", exc.kind.value, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_body())
    except Exception as exc:
        logger.exception("Unexpected error while processing request.")
        error = classify_error(exc)
        return JSONResponse(status_code=error.http_status, content=error.to_body())
    return JSONResponse(content=body)


def _preflight() -> Response:
    return Response(status_code=200)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict:
    """Return service status, configured models, and available endpoints."""
    return {
        "status": "ok",
        "service": "Sketchsynth",
        "version": __version__,
        "models": {
            "vision": config.vision_model,
            "synthesis": config.synthesis_model,
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": [
            f"POST {CODE_ROUTE}",
            f"POST {TEXT_ROUTE}",
            f"POST {DIAGRAM_ROUTE}",
            "GET /health",
        ],
    }


@app.post(CODE_ROUTE, response_model=CodeResponse, responses=_ERROR_RESPONSES)
def generate_code(req: GenerationRequest, request: Request) -> JSONResponse:
    """Generate a standalone HTML document from an image and/or text.

    With an image, the vision model first describes the UI and the text
    model then writes the page; without one, only the text model runs.

    Args:
        req: Validated :class:`GenerationRequest` payload.
        request: The incoming request (used to reach ``app.state``).

    Returns:
        ``{"html": ..., "processedWith": ...}`` or an error body.
    """
    pipeline: GenerationPipeline = request.app.state.pipeline
    return _respond(lambda: pipeline.generate_code(req).to_body())


@app.options(CODE_ROUTE, include_in_schema=False)
def generate_code_preflight() -> Response:
    return _preflight()


@app.post(TEXT_ROUTE, response_model=TextResponse, responses=_ERROR_RESPONSES)
def generate_text(req: GenerationRequest, request: Request) -> JSONResponse:
    """Answer a question about an image and/or text, or summarise it.

    Args:
        req: Validated :class:`GenerationRequest` payload; ``prompt`` is the
            question.
        request: The incoming request (used to reach ``app.state``).

    Returns:
        ``{"text": ..., "processedWith": ...}`` or an error body.
    """
    pipeline: GenerationPipeline = request.app.state.pipeline
    return _respond(lambda: pipeline.answer_question(req).to_body())


@app.options(TEXT_ROUTE, include_in_schema=False)
def generate_text_preflight() -> Response:
    return _preflight()


@app.post(DIAGRAM_ROUTE, response_model=DiagramResponse, responses=_ERROR_RESPONSES)
def generate_diagram(req: DiagramRequest, request: Request) -> JSONResponse:
    """Turn a natural-language description into Mermaid diagram code.

    Returns:
        ``{"generatedResponse": ...}`` or an error body.
    """
    pipeline: GenerationPipeline = request.app.state.pipeline
    return _respond(lambda: {"generatedResponse": pipeline.generate_diagram(req.prompt)})


@app.options(DIAGRAM_ROUTE, include_in_schema=False)
def generate_diagram_preflight() -> Response:
    return _preflight()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Configure logging and launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~sketchsynth.core.config.config`
    (``SKETCHSYNTH_SERVER_HOST``, ``SKETCHSYNTH_SERVER_PORT``,
    ``SKETCHSYNTH_LOG_LEVEL``).  Registered as the ``sketchsynth`` console
    script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "sketchsynth.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
