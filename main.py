"""
Main entry point of the FastAPI service.
Builds the application, wires the runtime and registers the routes.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import LoggingConfig, ServiceConfig
from core.runtime import FleetRuntime, build_runtime
from core.structured_logging import get_logger, set_request_context, setup_logging
from api.routes import router
from api.telemetry_routes import telemetry_router
from api.alert_routes import alert_router
from api.vehicle_routes import vehicle_router
from api.analytics_routes import router as analytics_router

logger = get_logger(__name__)

TRACE_HEADER = "X-Trace-Id"


# ============================================================================
# LIFESPAN
# ============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the runtime for the lifetime of the application."""
    setup_logging(
        service=ServiceConfig.APP_NAME,
        environment=ServiceConfig.ENVIRONMENT,
        log_level=LoggingConfig.LOG_LEVEL,
        log_file=LoggingConfig.LOG_FILE or None,
    )

    if getattr(app.state, "runtime", None) is None:
        app.state.runtime = build_runtime()
    logger.info("Fleet telemetry service started", context={
        "version": ServiceConfig.APP_VERSION,
    })

    yield

    logger.info("Fleet telemetry service stopping", context=app.state.runtime.stats())
    app.state.runtime = None


# ============================================================================
# FASTAPI APP
# ============================================================================
def create_app(runtime: Optional[FleetRuntime] = None) -> FastAPI:
    """
    Build the application.

    Args:
        runtime: Pre-built runtime (tests); built at startup when omitted
    """
    app = FastAPI(
        title="Fleet Telemetry Service",
        description="Telemetry ingestion, threshold alerting and fleet analytics",
        version=ServiceConfig.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    @app.middleware("http")
    async def trace_context(request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        set_request_context(trace_id)
        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.error("Unhandled exception", exc_info=exc, context={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
        })
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )

    app.include_router(router)
    app.include_router(vehicle_router)
    app.include_router(telemetry_router)
    app.include_router(alert_router)
    app.include_router(analytics_router)
    return app


app = create_app()


# ============================================================================
# MAIN (local development)
# ============================================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=ServiceConfig.HOST,
        port=ServiceConfig.PORT,
        reload=True
    )
