import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cardsmith.api import (
    cards_router,
    designs_router,
    files_router,
    health_router,
)
from cardsmith.config import settings
from cardsmith.db.database import init_db
from cardsmith.models.failure import (
    STORAGE_FAILURE_MESSAGE,
    FailureDetail,
    FailureKind,
    KnownError,
)
from cardsmith.storage.blobs import BlobStoreError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the server and jobs."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    await init_db()
    logger.info("%s started (blob backend: %s)", settings.app_name, settings.blob_backend)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardsmith"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(designs_router)
app.include_router(files_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _failure_response(status_code: int, failure: FailureDetail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=failure.model_dump(mode="json"))


@app.exception_handler(KnownError)
async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    """Known failures carry their own status code and message."""
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return _failure_response(exc.status_code, exc.to_detail())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed or missing request fields are client errors (400)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))

    if first.get("type") == "missing":
        kind = FailureKind.MISSING_REQUIRED
        message = f"Missing required field '{field}'"
    else:
        kind = FailureKind.INVALID_INPUT
        message = f"Invalid value for '{field}': {first.get('msg', 'invalid input')}"

    logger.info("%s %s -> 400 %s", request.method, request.url.path, message)
    return _failure_response(
        status.HTTP_400_BAD_REQUEST,
        FailureDetail(kind=kind, message=message, detail=f"{len(errors)} validation error(s)"),
    )


@app.exception_handler(SQLAlchemyError)
@app.exception_handler(BlobStoreError)
async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Storage failures get a fixed message; the cause is only logged."""
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _failure_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        FailureDetail(kind=FailureKind.STORAGE_UNAVAILABLE, message=STORAGE_FAILURE_MESSAGE),
    )
