"""HTTP REST server for regex-mask."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from regexmask import __version__
from regexmask.config import load_config
from regexmask.engine import ASTERISK, MaskingEngine
from regexmask.lifecycle import ExecutionScope, ScopeLifecycle
from regexmask.models import LifecycleState, MaskError, MaskPolicy
from regexmask.udf import ScopedMasker

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "regexmask_requests_total",
    "Total requests",
    ["endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "regexmask_request_duration_seconds",
    "Request duration in seconds",
    ["endpoint"],
)
MASK_OUTCOMES = Counter(
    "regexmask_mask_outcomes_total",
    "Masking calls by key and outcome",
    ["key", "outcome"],
)

UNKNOWN_KEY_LABEL = "unknown"

ERROR_STATUS = {
    MaskError.NULL_ARGUMENT: 422,
    MaskError.INVALID_MASK_LENGTH: 422,
    MaskError.UNKNOWN_KEY: 404,
    MaskError.PATTERN_COMPILE_ERROR: 500,
    MaskError.UNINITIALIZED_STATE: 503,
}


# Request/Response models
class MaskRequest(BaseModel):
    """Request model for /mask endpoint."""

    key: str
    text: str
    mask_char: Optional[str] = None


class MaskResponse(BaseModel):
    """Response model for /mask endpoint."""

    text: str
    key: str
    match_count: int


class KeyInfo(BaseModel):
    """Catalog entry in /keys response."""

    key: str
    pattern: str


class KeysResponse(BaseModel):
    """Response model for /keys endpoint."""

    keys: list[KeyInfo]


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""

    status: str
    version: str
    scope_state: str
    compiled_keys: list[str]


class RegexMaskServer:
    """Server wrapper owning one execution scope for all requests."""

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        """Initialize server with configuration and prepare its scope."""
        self.config = config or load_config()
        self.mask_char = self.config.get("masking", {}).get("mask_char", ASTERISK)

        self.lifecycle = ScopeLifecycle()
        self.masker = ScopedMasker(self.lifecycle, MaskingEngine())
        self.scope = ExecutionScope(scope_id="http")
        self.lifecycle.init(self.scope)

    @property
    def state(self) -> LifecycleState:
        """Lifecycle state of the server scope."""
        return self.lifecycle.state(self.scope)

    def close(self) -> None:
        """Tear down the server scope."""
        self.lifecycle.teardown(self.scope)

    def metric_key(self, key: str) -> str:
        """Label value for key; keys outside the catalog share one series."""
        return key if key in self.lifecycle.catalog else UNKNOWN_KEY_LABEL


def create_app(config: Optional[dict[str, Any]] = None) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        config: Server configuration dictionary

    Returns:
        FastAPI application instance
    """
    server = RegexMaskServer(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        server.close()

    app = FastAPI(
        title="regex-mask",
        description="Length-preserving regex masking service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.server = server

    # Middleware for metrics and timing
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Any) -> Response:
        """Record metrics for each request."""
        start_time = time.time()
        endpoint = request.url.path

        response = await call_next(request)

        duration = time.time() - start_time
        REQUEST_COUNT.labels(endpoint=endpoint, status=response.status_code).inc()
        REQUEST_DURATION.labels(endpoint=endpoint).observe(duration)

        return response

    @app.post("/mask", response_model=MaskResponse)
    def mask(request: MaskRequest) -> MaskResponse:
        """Mask text with a catalog pattern."""
        mask_char = request.mask_char if request.mask_char is not None else server.mask_char
        policy = MaskPolicy.FILL_ASTERISK if mask_char == ASTERISK else MaskPolicy.REPLACE_CHAR
        result = server.masker.mask_detailed(
            server.scope,
            request.key,
            request.text,
            mask_char=mask_char,
            policy=policy,
        )
        metric_key = server.metric_key(request.key)

        if not result.ok or result.text is None:
            error = result.error or MaskError.NULL_ARGUMENT
            MASK_OUTCOMES.labels(key=metric_key, outcome=error.value).inc()
            detail = result.message or error.value
            raise HTTPException(status_code=ERROR_STATUS[error], detail=detail)

        MASK_OUTCOMES.labels(key=metric_key, outcome="ok").inc()
        return MaskResponse(text=result.text, key=request.key, match_count=result.match_count)

    @app.get("/keys", response_model=KeysResponse)
    def keys() -> KeysResponse:
        """List catalog keys."""
        entries = server.lifecycle.catalog.entries()
        return KeysResponse(keys=[KeyInfo(key=e.key, pattern=e.pattern) for e in entries])

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        """Health check endpoint."""
        cache = server.lifecycle.cache(server.scope)
        if cache is None:
            raise HTTPException(status_code=503, detail="Scope not prepared")

        return HealthResponse(
            status="healthy",
            version=__version__,
            scope_state=server.state.value,
            compiled_keys=cache.compiled_keys(),
        )

    @app.get("/metrics")
    def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
