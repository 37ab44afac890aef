from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from nokanban.api.boards import router as boards_router
from nokanban.core.config import get_settings
from nokanban.core.exceptions.base import AppException
from nokanban.core.exceptions.domain import RateLimitError
from nokanban.core.logger import setup_logger


async def _init_db() -> None:
    """Ensure database directory and tables exist."""
    from nokanban.models.db import create_tables

    settings = get_settings()
    settings.db_directory.mkdir(parents=True, exist_ok=True)
    await create_tables()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    setup_logger(debug=settings.debug)
    await _init_db()
    logger.info(f"{settings.app_name} started")
    yield


async def handle_app_exception(_request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Unhandled application error: {exc.message}")

    body: dict = {"error": exc.message, "code": exc.status_code}
    headers = {}
    if isinstance(exc, RateLimitError) and exc.retry_after:
        body["retryAfter"] = exc.retry_after
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.debug(f"Rejected {request.method} {request.url.path}: {len(errors)} invalid fields")
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message, "code": 400})


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan if with_lifespan else None)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(boards_router)
    app.include_router(api_v1)
    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run("nokanban.main:app", host="0.0.0.0", port=8787)


if __name__ == "__main__":
    main()
