"""Semantic store HTTP API."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from semantic_store import __version__
from semantic_store.core.config import ApiSettings, StoreConfig
from semantic_store.core.errors import (
    CollaboratorUnavailable,
    EntryConflict,
    UnsupportedOperation,
    ValidationFailure,
)
from semantic_store.core.service import SemanticSearchService
from semantic_store.core.storage import create_repository

logger = logging.getLogger(__name__)

SERVICE_NAME = "semantic-store"
NOT_FOUND_MESSAGE = "Semantic search entry not found"

router = APIRouter(prefix="/api/semantic-search", tags=["semantic-search"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ok(data: Any = None, message: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body["timestamp"] = _timestamp()
    return body


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    content = {"success": False, "error": error, **extra, "timestamp": _timestamp()}
    return JSONResponse(status_code=status_code, content=content)


def _not_found() -> JSONResponse:
    return _error(404, NOT_FOUND_MESSAGE)


def get_service(request: Request) -> SemanticSearchService:
    return request.app.state.service


@router.post("/entries", status_code=201)
async def create_entry(
    payload: Any = Body(...),
    service: SemanticSearchService = Depends(get_service),
) -> dict[str, Any]:
    """Create a new semantic search entry."""
    entry = service.create_entry(payload)
    return _ok(entry.to_dict(), "Semantic search entry created successfully")


@router.get("/entries/{entry_id}", response_model=None)
async def get_entry(
    entry_id: str, service: SemanticSearchService = Depends(get_service)
) -> dict[str, Any] | JSONResponse:
    entry = service.get_entry(entry_id)
    if entry is None:
        return _not_found()
    return _ok(entry.to_dict())


@router.put("/entries/{entry_id}", response_model=None)
async def replace_entry(
    entry_id: str,
    payload: Any = Body(...),
    service: SemanticSearchService = Depends(get_service),
) -> dict[str, Any] | JSONResponse:
    """Replace an entry completely; id and created_at are preserved."""
    entry = service.replace_entry(entry_id, payload)
    if entry is None:
        return _not_found()
    return _ok(entry.to_dict(), "Semantic search entry replaced successfully")


@router.patch("/entries/{entry_id}", response_model=None)
async def patch_entry(
    entry_id: str,
    payload: Any = Body(None),
    service: SemanticSearchService = Depends(get_service),
) -> NoReturn:
    """Partial updates are not implemented; always answers 501."""
    service.patch_entry(entry_id, payload)


@router.delete("/entries/{entry_id}", response_model=None)
async def delete_entry(
    entry_id: str, service: SemanticSearchService = Depends(get_service)
) -> dict[str, Any] | JSONResponse:
    if not service.delete_entry(entry_id):
        return _not_found()
    return _ok(message="Semantic search entry deleted successfully")


@router.post("/search")
async def search_entries(
    payload: Any = Body(...),
    service: SemanticSearchService = Depends(get_service),
) -> dict[str, Any]:
    """Search entries by vector similarity, with optional boosting."""
    results = service.search(payload)
    return _ok(results.to_dict())


@router.get("/users/{user_id}/entries")
async def list_user_entries(
    user_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    content_type: Optional[str] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    service: SemanticSearchService = Depends(get_service),
) -> dict[str, Any]:
    entries = service.list_user_entries(
        user_id,
        page=page,
        limit=limit,
        content_type=content_type,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return _ok(entries.to_dict())


@router.get("/content-types/{content_type}/entries")
async def list_entries_by_type(
    content_type: str,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user_id: Optional[str] = Query(None),
    service: SemanticSearchService = Depends(get_service),
) -> dict[str, Any]:
    entries = service.list_entries_by_type(content_type, limit=limit, user_id=user_id)
    return _ok(
        {
            "entries": [entry.to_dict() for entry in entries],
            "content_type": content_type,
            "total": len(entries),
        }
    )


@router.get("/stats")
async def get_stats(service: SemanticSearchService = Depends(get_service)) -> dict[str, Any]:
    return _ok(service.stats())


@router.get("/health", response_model=None)
async def store_health(
    service: SemanticSearchService = Depends(get_service),
) -> JSONResponse:
    """Health of the storage collaborator."""
    health = service.health()
    healthy = health["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "success": healthy,
            "service": SERVICE_NAME,
            "database": health,
            "timestamp": _timestamp(),
        },
    )


def _register_error_handlers(app: FastAPI, settings: ApiSettings) -> None:
    @app.exception_handler(ValidationFailure)
    async def handle_validation_failure(request: Request, exc: ValidationFailure) -> JSONResponse:
        return _error(400, "Validation failed", details=exc.to_list())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
                "value": None,
            }
            for error in exc.errors()
        ]
        return _error(400, "Validation failed", details=details)

    @app.exception_handler(UnsupportedOperation)
    async def handle_unsupported(request: Request, exc: UnsupportedOperation) -> JSONResponse:
        return _error(501, str(exc))

    @app.exception_handler(EntryConflict)
    async def handle_conflict(request: Request, exc: EntryConflict) -> JSONResponse:
        return _error(409, "Duplicate entry found")

    @app.exception_handler(CollaboratorUnavailable)
    async def handle_unavailable(request: Request, exc: CollaboratorUnavailable) -> JSONResponse:
        return _error(503, "Database service unavailable")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "Internal Server Error" if settings.is_production else str(exc)
        return _error(500, message)


def create_app(
    service: Optional[SemanticSearchService] = None,
    settings: Optional[ApiSettings] = None,
) -> FastAPI:
    """Build the FastAPI application around an explicitly provided service.

    When no service is given, one is created from the default StoreConfig.
    """
    settings = settings or ApiSettings()
    if service is None:
        config = StoreConfig()
        service = SemanticSearchService(create_repository(config), config=config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.service.close()

    app = FastAPI(
        title="Semantic Store API",
        description="Metadata-rich semantic entry store with boosted similarity search",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.settings = settings

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "timestamp": _timestamp(),
            "version": __version__,
        }

    app.include_router(router)
    _register_error_handlers(app, settings)
    return app


def main() -> None:
    import uvicorn

    from semantic_store.logging_config import setup_logging

    settings = ApiSettings()
    setup_logging(settings)
    uvicorn.run(
        "semantic_store.api:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
