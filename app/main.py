# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Model Validator API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#
# Models are discovered when the app is built (not in the lifespan) because
# the per-model routes have to exist before the catch-all route is added.
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config import API_VERSION, settings
from app.exceptions import (
    ValidatorServiceException,
    request_validation_exception_handler,
    unhandled_exception_handler,
    validator_service_exception_handler,
)
from app.routers import batch, health, models, validation
from core.services.batch_session_service import (
    BatchSessionManager,
    expiry_sweep,
    get_batch_session_manager,
)
from registry import get_registry
from registry.endpoints import register_http_endpoints
from registry.store import ModelStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: start the batch expiry sweep
    - Shutdown: stop the sweep, cancel pending batch deletions
    """
    logger.info(f"Starting Model Validator API in {settings.ENVIRONMENT} mode")
    logger.info(f"Registered model types: {', '.join(app.state.registry.type_names()) or 'none'}")

    sweep_task = asyncio.create_task(
        expiry_sweep(app.state.batch_manager, settings.BATCH_CLEANUP_INTERVAL_SECONDS)
    )

    yield

    logger.info("Shutting down Model Validator API")
    sweep_task.cancel()
    try:
        await sweep_task
    except asyncio.CancelledError:
        pass
    app.state.batch_manager.shutdown()


def create_app(
    registry: ModelStore | None = None,
    batch_manager: BatchSessionManager | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        registry: Model store to serve; defaults to the discovered shared one
        batch_manager: Batch session manager; defaults to the shared one
    """
    app = FastAPI(
        title="Model Validator API",
        description="""
## Dynamic Model Validation API

Validates records against model types discovered at startup.

### Endpoints

| Endpoint | Purpose |
|----------|---------|
| `POST /validate/{type}` | Validate one raw record |
| `POST /validate` | Validate `payload` (one record) or `data` (a list, optional `threshold`) |
| `POST /validate/batch/start` | Open a batch session |
| `GET /validate/batch/{id}` | Batch running totals |
| `POST /validate/batch/{id}/complete` | Batch verdict |
| `GET /models` | Registered model types |

### Adding a model type

Drop `payloads/<name>.py` (a pydantic model) and `validations/<name>.py`
(a validator) into the project and restart.
""",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Validation", "description": "Validate records"},
            {"name": "Batch", "description": "Multi-request batch sessions"},
            {"name": "Models", "description": "Registered model types"},
            {"name": "Health", "description": "API health checks"},
        ],
    )

    app.state.registry = registry if registry is not None else get_registry()
    app.state.batch_manager = batch_manager if batch_manager is not None else get_batch_session_manager()

    # =========================================================================
    # Middleware
    # =========================================================================

    # CORS middleware - allows cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(ValidatorServiceException, validator_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # =========================================================================
    # Routers (order matters: specific routes before the catch-all)
    # =========================================================================

    app.include_router(batch.router, tags=["Batch"])

    model_routes = APIRouter()
    count = register_http_endpoints(model_routes, app.state.registry)
    app.include_router(model_routes, tags=["Validation"])
    logger.info(f"Registered {count} model validation endpoint(s)")

    app.include_router(validation.router, tags=["Validation"])
    app.include_router(models.router, tags=["Models"])
    app.include_router(health.router, tags=["Health"])

    # =========================================================================
    # Root Endpoint
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "Model Validator API",
            "version": API_VERSION,
            "docs": "/docs",
            "health": "/health",
            "models": "/models",
            "models_registered": len(app.state.registry),
        }

    return app


app = create_app()
