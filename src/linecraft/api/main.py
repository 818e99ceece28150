"""Linecraft - FastAPI Application.

This module defines the FastAPI ``app`` instance, the REST routes that
expose the prompt refinement engine, and the ``main()`` CLI function that
launches the uvicorn server.

Architecture
------------
- **Refinement** is performed by a single
  :class:`~linecraft.core.refinement.PromptRefinementService` created in the
  application lifespan and stored on ``app.state``.  Routes receive it
  through the :func:`get_refinement_service` dependency.
- **Failures** inside the engine never become HTTP errors: the response is
  always 200 and the ``success`` flag in the payload tells the caller
  whether the fallback prompt was used.  Only malformed request bodies are
  rejected (422, by FastAPI).

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
POST      ``/api/refine-prompt``        Refine a description into a prompt
GET       ``/api/health``               Service and completion status
GET       ``/api/catalog``              Categories and preference values
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    linecraft

Direct invocation::

    python -m linecraft.api.main
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linecraft import __version__
from linecraft.api.models import RefinePromptRequest
from linecraft.core.catalog import CATEGORY_NAMES
from linecraft.core.config import config
from linecraft.core.models import (
    AGE_GROUPS,
    BORDER_OPTIONS,
    COMPLEXITY_LEVELS,
    LINE_THICKNESSES,
    THEMES,
    RefinementResult,
    utc_timestamp,
)
from linecraft.core.refinement import PromptRefinementService

# Configure logging
logging.basicConfig(
    level=config.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Linecraft Prompt Refinement API"


# ---------------------------------------------------------------------------
# Application lifecycle - refinement service setup.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared refinement service on startup.

    The service is stateless between calls, so one instance serves every
    request.  Tests may pre-populate ``app.state.refinement_service`` to
    inject a service with stubbed collaborators.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    if getattr(app.state, "refinement_service", None) is None:
        app.state.refinement_service = PromptRefinementService(config)
    logger.info(f"PromptRefinementService initialised (environment={config.environment}).")

    yield


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Linecraft",
    description="Prompt refinement API for black-and-white coloring pages.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so the frontend can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_refinement_service(request: Request) -> PromptRefinementService:
    """Return the shared service created by :func:`lifespan`."""
    return request.app.state.refinement_service


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.post("/api/refine-prompt", response_model=RefinementResult)
def refine_prompt(
    req: RefinePromptRequest,
    service: PromptRefinementService = Depends(get_refinement_service),
) -> RefinementResult:
    """Refine a free-text description into a coloring page prompt.

    Declared as a plain ``def`` so FastAPI runs it in its threadpool; the
    optional completion call blocks for up to the configured timeout.

    Returns:
        The :class:`RefinementResult`.  Always 200; check ``success``.
    """
    start = time.perf_counter()
    result = service.refine(req.prompt, req.customizations, req.options)
    elapsed_ms = round((time.perf_counter() - start) * 1000, 3)

    logger.info(
        f"Prompt refinement served in {elapsed_ms}ms "
        f"(success={result.success}, method={result.metadata.method}, "
        f"category={result.detected_category}, refined_length={len(result.refined_prompt)})"
    )
    return result


@app.get("/api/health")
def health(service: PromptRefinementService = Depends(get_refinement_service)) -> JSONResponse:
    """Return API and refinement service health.

    Responds 200 when the refinement service is healthy and 503 otherwise.
    """
    refinement_health = service.health_check()
    healthy = refinement_health.get("status") == "healthy"

    body = {
        "status": "ok" if healthy else "unhealthy",
        "timestamp": utc_timestamp(),
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": config.environment,
        "completion": "connected" if refinement_health.get("completion_connected") else "mock",
        "prompt_refinement": refinement_health.get("status"),
        "features": refinement_health.get("features", {}),
        "endpoints": {
            "refine_prompt": "/api/refine-prompt",
            "health": "/api/health",
            "catalog": "/api/catalog",
        },
    }
    if not healthy:
        body["error"] = refinement_health.get("error")
        logger.warning(f"Health check reported unhealthy: {body['error']}")

    return JSONResponse(content=body, status_code=200 if healthy else 503)


@app.get("/api/catalog")
async def get_catalog() -> dict:
    """Return subject categories and the allowed preference values.

    Front-ends use this to populate their preference controls.
    """
    return {
        "version": __version__,
        "categories": list(CATEGORY_NAMES),
        "preferences": {
            "complexity": list(COMPLEXITY_LEVELS),
            "age_group": list(AGE_GROUPS),
            "line_thickness": list(LINE_THICKNESSES),
            "border": list(BORDER_OPTIONS),
            "theme": list(THEMES),
        },
    }


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~linecraft.core.config.config` (which
    loads from ``LINECRAFT_SERVER_HOST`` and ``LINECRAFT_SERVER_PORT``).

    This function is registered as the ``linecraft`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    uvicorn.run(
        "linecraft.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
