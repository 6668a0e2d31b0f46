"""
ChatSurfer Test Server
FastAPI application emulating a subset of the ChatSurfer chat API with canned data
"""
import argparse
import json
import random
import time
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from chatsurfer_server.models.chat import ErrorCode400, FieldError
from chatsurfer_server.routers import auth, messages, websocket
from chatsurfer_server.services.config import Settings
from chatsurfer_server.services.fixtures import FixtureGenerator
from chatsurfer_server.services.search import InvalidSearchQuery
from chatsurfer_server.utils.logging import setup_logging
from chatsurfer_server.utils.metrics import active_connections, request_counter, request_duration

# Load settings
settings = Settings()

# Configure structured logging
setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = structlog.get_logger()


def setup_tracing(app: FastAPI, settings: Settings):
    """Install an OTLP tracer provider and instrument the app"""
    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider(resource=Resource.create({"service.name": settings.OTEL_SERVICE_NAME}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTEL_ENDPOINT, insecure=True))
    )
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    logger.info("Tracing enabled", endpoint=settings.OTEL_ENDPOINT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting ChatSurfer test server",
                version=settings.API_VERSION,
                environment=settings.ENVIRONMENT)

    if settings.OTEL_ENABLED:
        setup_tracing(app, settings)

    # Set services in app state
    app.state.settings = settings
    app.state.fixture_generator = FixtureGenerator(settings)
    app.state.seed_source = random.Random()

    logger.info("Server initialization complete")

    yield

    # Shutdown
    logger.info("Shutting down ChatSurfer test server")


# Create FastAPI app
app = FastAPI(
    title="ChatSurfer Test Server",
    description="Canned-data stand-in for the ChatSurfer chat API",
    version=settings.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.ENABLE_DOCS else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template of the matched route, so label values stay bounded"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


# Middleware for request tracking
@app.middleware("http")
async def track_requests(request: Request, call_next):
    """Track request metrics and add request ID"""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

    active_connections.inc()
    start_time = time.time()

    # Add request ID to logger context
    structlog.contextvars.bind_contextvars(request_id=request_id)

    try:
        response = await call_next(request)

        duration = time.time() - start_time
        if settings.ENABLE_METRICS:
            endpoint = endpoint_label(request)
            request_counter.labels(
                method=request.method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=endpoint
            ).observe(duration)

        response.headers["X-Request-ID"] = request_id

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=duration
        )

        return response

    except Exception as e:
        logger.error(
            "Request failed",
            method=request.method,
            path=request.url.path,
            error=str(e)
        )
        if settings.ENABLE_METRICS:
            request_counter.labels(
                method=request.method,
                endpoint=endpoint_label(request),
                status=500
            ).inc()
        raise

    finally:
        active_connections.dec()
        structlog.contextvars.unbind_contextvars("request_id")


# Include routers
app.include_router(messages.router)
app.include_router(auth.router)
app.include_router(websocket.router)


@app.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "version": settings.API_VERSION}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    if not settings.ENABLE_METRICS:
        return Response(status_code=404)
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def bad_request(message: str, field_errors: List[FieldError]) -> JSONResponse:
    body = ErrorCode400(
        classification=settings.CLASSIFICATION,
        code=400,
        field_errors=field_errors,
        message=message,
    )
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


def _rejected(value) -> Optional[str]:
    """Render a rejected input for the wire; non-strings as JSON"""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, default=str)


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unroutable requests get an empty 404; other HTTP errors a JSON body"""
    if exc.status_code in (404, 405):
        logger.info("No route", method=request.method, path=request.url.path)
        return Response(status_code=404)
    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies become an ErrorCode400"""
    field_errors = [
        FieldError(
            field_name=".".join(str(part) for part in error["loc"] if part != "body") or "body",
            message=error["msg"],
            message_arguments=[],
            message_code=error["type"],
            rejected_value=_rejected(error.get("input")),
        )
        for error in exc.errors()
    ]
    logger.warning("Malformed request", path=request.url.path, errors=len(field_errors))
    return bad_request("Request validation failed", field_errors)


@app.exception_handler(InvalidSearchQuery)
async def invalid_search_handler(request: Request, exc: InvalidSearchQuery):
    """Handle queries with no usable token"""
    logger.warning("Invalid search query", path=request.url.path, query=exc.rejected_value)
    return bad_request(str(exc), [
        FieldError(
            field_name=exc.field,
            message=str(exc),
            message_arguments=[],
            message_code="NotBlank",
            rejected_value=exc.rejected_value,
        )
    ])


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        path=request.url.path,
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "request_id": request.headers.get("X-Request-ID")
        }
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ChatSurfer test server")
    parser.add_argument("--client_serve_ip", default=settings.HOST,
                        help="address to serve client requests from")
    parser.add_argument("--client_port", type=int, default=settings.PORT,
                        help="port to serve client requests from")
    return parser.parse_args(argv)


def run(argv=None):
    """Console entry point"""
    import uvicorn

    args = parse_args(argv)
    logger.info("Serving requests", host=args.client_serve_ip, port=args.client_port)
    uvicorn.run(
        app,
        host=args.client_serve_ip,
        port=args.client_port,
        log_config=None,  # Use structlog instead
        access_log=False,  # Handled by middleware
    )


if __name__ == "__main__":
    run()
