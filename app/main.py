import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.auth.router import router as auth_router
from app.api.v1.connect_interfaces.router import router as connect_interfaces_router
from app.api.v1.courses.router import router as courses_router
from app.api.v1.leave_statements.router import router as leave_statements_router
from app.api.v1.leaves.router import router as leaves_router
from app.api.v1.suggestions.router import router as suggestions_router
from app.api.v1.users.router import router as users_router
from app.core.config import settings
from app.core.exceptions import ServiceError, ValidationError
from app.core.logging import configure_logging
from app.core.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        errors = exc.errors if isinstance(exc, ValidationError) else None
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return _error(exc.status_code, exc.message, errors, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
            message = err.get("msg", "Invalid value")
            # pydantic prefixes messages raised from validators
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.append({"field": loc[-1] if loc else "body", "message": message})
        return _error(status.HTTP_400_BAD_REQUEST, "Validation error", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Database error. Please try again later.")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Coordinator Coordination Backend")

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(courses_router)
    app.include_router(leaves_router)
    app.include_router(leave_statements_router)
    app.include_router(suggestions_router)
    app.include_router(connect_interfaces_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "success", "message": "Server is running"}

    return app


app = create_app()
