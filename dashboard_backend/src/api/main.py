import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .dashboard import Dashboard
from .errors import ImportParseError, StorageError
from .routers import document as document_router
from .routers import logs as logs_router
from .routers import metrics as metrics_router
from .routers import notes as notes_router
from .routers import snippets as snippets_router
from .routers import tasks as tasks_router
from .settings import Settings, get_settings
from .state_store import StateStore
from .storage import KeyValueStorage, get_storage
from .utils import now_ms

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "Task board: create, edit, move between columns, cycle priority."},
    {"name": "notes", "description": "Sticky notes in drag order, with tags and colors."},
    {"name": "snippets", "description": "Code snippet vault with search."},
    {"name": "focus", "description": "Pomodoro timer and the focus session log."},
    {"name": "caffeine", "description": "Caffeine intake log."},
    {"name": "metrics", "description": "Derived analytics recomputed from the logs on every request."},
    {"name": "document", "description": "The persisted document: settings, export and import."},
]


def _error_response(status_code: int, error: str, message: str, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "detail": detail},
    )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    clock: Callable[[], int] = now_ms,
) -> FastAPI:
    """
    Build the API around a Dashboard loaded from the configured storage.

    Tests pass their own storage and clock; the module-level app uses the
    environment settings.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = StateStore(storage or get_storage(settings), key=settings.storage_key, clock=clock)
    dashboard = Dashboard(store, settings=settings, clock=clock)

    app = FastAPI(
        title="Night Shift Dashboard",
        description="Local single-user backend for the task board, notes, snippets, focus timer and caffeine log.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.dashboard = dashboard

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return _error_response(422, "ValidationError", "Request validation failed", exc.errors())

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
        """The change is applied in memory but could not be persisted."""
        logger.error("Saving the document failed: %s", exc)
        return _error_response(507, "StorageError", "The document could not be saved", str(exc))

    @app.exception_handler(ImportParseError)
    async def import_exception_handler(request: Request, exc: ImportParseError) -> JSONResponse:
        return _error_response(400, "ImportParseError", "Import file is not valid JSON", str(exc))

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    app.include_router(notes_router.router)
    app.include_router(snippets_router.router)
    app.include_router(logs_router.router)
    app.include_router(metrics_router.router)
    app.include_router(document_router.router)
    return app


app = create_app()
