"""FastAPI application for the bonding-curve exchange.

Note: Authentication beyond the admin token is intentionally not implemented
here. Caller identity is taken from the request body as reported, and should
be established by the infrastructure in front of this service.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bondcurve.api.endpoints import router
from bondcurve.errors import (
    ExchangeError,
    InvalidCapability,
    PoolAlreadyExists,
    PoolNotFound,
)

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BONDCURVE_HOST", "0.0.0.0")
PORT = int(os.environ.get("BONDCURVE_PORT", "8000"))
DEBUG = os.environ.get("BONDCURVE_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB)
MAX_REQUEST_SIZE = 64 * 1024

# HTTP status per error type; anything else is a 400
ERROR_STATUS: dict[type[ExchangeError], int] = {
    InvalidCapability: 403,
    PoolNotFound: 404,
    PoolAlreadyExists: 409,
}

app = FastAPI(
    title="Bonding Curve Exchange",
    description="Bonding-curve AMM between a settlement asset and launched tokens",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(ExchangeError)
async def exchange_error_handler(request: Request, exc: ExchangeError) -> JSONResponse:
    """Turn an aborted operation into a JSON error; no state was changed."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.warning(
        "exchange_error",
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables:
    - BONDCURVE_HOST: Host to bind to (default: 0.0.0.0)
    - BONDCURVE_PORT: Port to bind to (default: 8000)
    - BONDCURVE_DEBUG: Enable debug/reload mode (default: false)
    - BONDCURVE_ADMIN_TOKEN: Secret required by admin endpoints (default: unset)
    - BONDCURVE_CREATION_FEE: Initial pool creation fee in base units
    """
    uvicorn.run(
        "bondcurve.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
