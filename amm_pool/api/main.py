"""FastAPI application for the pool service.

Note: every request runs against one in-process Market. Mutating handlers are
plain (sync) functions, so FastAPI runs them in its threadpool; the pool's
transaction lock serializes them.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm_pool import __version__
from amm_pool.api.endpoints import router
from amm_pool.errors import AMMError
from amm_pool.models.requests import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB); every request model is a handful of fields
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="AMM Pool (Python)",
    description="Constant-product liquidity pool with a slippage-checked router",
    version=__version__,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject malformed or oversized bodies, then log every request with its status."""
    content_length = request.headers.get("content-length")
    try:
        declared_size = int(content_length) if content_length else 0
    except ValueError:
        logger.warning("invalid_content_length", value=content_length)
        return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length"})
    if declared_size > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    response = await call_next(request)
    logger.info(
        "request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
    )
    return response


@app.exception_handler(AMMError)
async def amm_error_handler(request: Request, exc: AMMError) -> JSONResponse:
    """Map pool, router and ledger failures to 400 with a stable error code."""
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
    )
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_TREASURY / AMM_TAX_ENABLED: see MarketConfig.from_env
    """
    uvicorn.run(
        "amm_pool.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
