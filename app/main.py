from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.auth.router import router as auth_router
from app.api.v1.classrooms.router import router as classrooms_router
from app.api.v1.schools.router import router as schools_router
from app.api.v1.students.router import router as students_router
from app.api.v1.users.router import router as users_router
from app.core.logging import configure_logging, get_logger
from app.core.responses import error_result
from app.db.session import engine

logger = get_logger(__name__)

INVALID_ID_MESSAGE = "Invalid ID format"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = first.get("loc") or ()
    # Malformed path ids are reported uniformly
    if loc and loc[0] == "path":
        return INVALID_ID_MESSAGE
    field = ".".join(str(part) for part in loc[1:]) or "request"
    return f"{field}: {first.get('msg', 'is not valid')}"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging()
    logger.info("Starting up")
    yield
    logger.info("Shutting down, disposing DB engine")
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(title="School Management Backend", lifespan=lifespan)

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(schools_router)
    app.include_router(classrooms_router)
    app.include_router(students_router)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_result(_validation_message(exc), status.HTTP_400_BAD_REQUEST).to_response()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = error_result(str(exc.detail), exc.status_code).to_response()
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return error_result("Internal server error").to_response()

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
