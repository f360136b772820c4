"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from timekeeper.api.v1.api import api_router
from timekeeper.db.database import close_db, init_db
from timekeeper.errors import TimeTrackingError
from timekeeper.models.schemas import ErrorResponse
from timekeeper.settings import settings
from timekeeper.utils import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("timekeeper-api")
    init_db()
    logger.info(f"timekeeper API started ({settings.environment})")
    yield
    close_db()


app = FastAPI(
    title="Timekeeper API",
    description="Personal time tracking: folders, modules, entries and timer sessions",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Error envelope ====================


@app.exception_handler(TimeTrackingError)
async def tracking_error_handler(request: Request, exc: TimeTrackingError):
    status_code = getattr(exc, "status_code", None) or 500
    logger.warning(f"{request.method} {request.url.path} failed ({status_code}): {exc.message}")
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=exc.message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"{request.method} {request.url.path} failed ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


# Include routers
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {
        "status": "ok",
        "service": "Timekeeper API",
        "version": "0.1.0",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "timekeeper.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
