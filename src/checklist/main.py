from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import DialogStateError, ItemNotFoundError, ValidationError
from .logging_config import setup_logging
from .routers import checklist as checklist_router
from .session import ListSession
from .settings import Settings, get_settings
from .storage import KeyValueStore, get_key_value_store

logger = structlog.get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "checklist",
        "description": "Ordered checklist: add, edit, reorder, delete, uncheck all, import and copy.",
    },
]


def _validation_body(detail: list) -> dict:
    return {
        "error": "ValidationError",
        "message": "Request validation failed",
        "detail": detail,
    }


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, storage: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Build the application with its own list session.

    The session is loaded from storage at construction and kept on
    app.state.session for the lifetime of the process.
    """
    settings = settings or get_settings()
    setup_logging(settings.app_env, settings.log_level)

    app = FastAPI(
        title="Checklist Backend",
        description="Single-list checklist service persisting to a key-value store.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    storage = storage if storage is not None else get_key_value_store(settings)
    app.state.settings = settings
    app.state.session = ListSession(storage, settings=settings)
    logger.info("app_created", backend=settings.persistence_backend, key=settings.storage_key)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [{"loc": [...], "msg": "...", "type": "..."}, ...],
                "message": "Request validation failed"
            }
        """
        # Rejected input is not echoed back; it may not be encodable
        detail = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
        return JSONResponse(status_code=422, content=_validation_body(detail))

    @app.exception_handler(ValidationError)
    async def empty_field_handler(request: Request, exc: ValidationError) -> JSONResponse:
        """Same shape as request validation errors, for empty required fields."""
        detail = [{"loc": ["body", exc.field], "msg": exc.message, "type": "value_error.missing"}]
        return JSONResponse(status_code=422, content=_validation_body(detail))

    @app.exception_handler(ItemNotFoundError)
    async def item_not_found_handler(request: Request, exc: ItemNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Item not found"})

    @app.exception_handler(DialogStateError)
    async def dialog_state_handler(request: Request, exc: DialogStateError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(checklist_router.router)
    return app


app = create_app()
