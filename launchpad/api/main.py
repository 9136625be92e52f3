"""FastAPI application for the launchpad engine."""

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from launchpad import __version__
from launchpad.api.endpoints import router
from launchpad.config import SUPPORTED_NETWORKS

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LAUNCHPAD_HOST", "0.0.0.0")
PORT = int(os.environ.get("LAUNCHPAD_PORT", "8000"))
DEBUG = os.environ.get("LAUNCHPAD_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="Launchpad Curve Engine",
    description="Bonding-curve pricing, quotes and registry listing for a token launchpad",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "networks": list(SUPPORTED_NETWORKS)}


def run() -> None:
    """Run the launchpad API server.

    Configuration via environment variables:
    - LAUNCHPAD_HOST: Host to bind to (default: 0.0.0.0)
    - LAUNCHPAD_PORT: Port to bind to (default: 8000)
    - LAUNCHPAD_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "launchpad.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
