from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.itineraries import router as itineraries_router
from src.domain.exceptions import RoutingError, UnknownStopError

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="GTFS Itinerary Graph")
app.include_router(itineraries_router)


def _reveal_errors() -> bool:
    return (os.getenv("ITINERARY_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }


@app.exception_handler(RoutingError)
async def routing_error_handler(request: Request, exc: RoutingError) -> JSONResponse:
    """Map search errors to client errors: unknown stops are 404, the rest 400."""

    status_code = 404 if isinstance(exc, UnknownStopError) else 400
    logger.info("%s on %s: %s", exc.__class__.__name__, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})

    # Missing or malformed feed files are worth showing; anything else stays opaque.
    if _reveal_errors() or isinstance(exc, (FileNotFoundError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
