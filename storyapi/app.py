"""FastAPI application factory: routers, services, error mapping and middleware."""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from storyapi.core.config import Settings, get_settings
from storyapi.core.logging import configure_logging
from storyapi.core.responses import error_response, success_response
from storyapi.domain.stories import StoryValidationError
from storyapi.repositories.errors import DBError, NotFoundError
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.routers import auth as auth_router
from storyapi.routers import blogs as blogs_router
from storyapi.routers import stories as stories_router
from storyapi.routers import users as users_router
from storyapi.services.auth_service import AuthService, InvalidCredentialsError
from storyapi.services.blog_service import BlogService
from storyapi.services.story_service import StoryService
from storyapi.services.token_service import TokenError
from storyapi.services.user_service import UserService

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time of every request."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


def validation_message(errors: list[dict[str, Any]]) -> str:
    """Turn the first pydantic error into a sentence a client can show."""
    if not errors:
        return "Validation failed"
    first = errors[0]
    loc = first.get("loc") or ()
    field = str(loc[-1]) if loc else "input"
    ctx = first.get("ctx") or {}
    kind = first.get("type", "")
    if kind == "string_too_short":
        return f"The {field} field must be at least {ctx.get('min_length')} characters"
    if kind == "string_pattern_mismatch" and field == "email":
        return f"The {field} field must be a valid email address"
    if kind == "greater_than":
        return f"The {field} field must be greater than {ctx.get('gt')}"
    return "Validation failed"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return error_response(validation_message(list(exc.errors())), 400)

    @app.exception_handler(StoryValidationError)
    async def _story_validation(request: Request, exc: StoryValidationError):
        return error_response(str(exc), 400)

    @app.exception_handler(TokenError)
    async def _token_error(request: Request, exc: TokenError):
        logger.error("token issuance failed: %s", exc)
        return error_response(str(exc), 400)

    @app.exception_handler(DBError)
    async def _db_error(request: Request, exc: DBError):
        logger.warning("database error %s on %s %s", exc.code, request.method, request.url.path)
        return error_response(exc.message, 400)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return error_response(exc.message, 404)

    @app.exception_handler(InvalidCredentialsError)
    async def _invalid_credentials(request: Request, exc: InvalidCredentialsError):
        return error_response(exc.message, 401)


def create_app(settings: Optional[Settings] = None, repository: Optional[SQLRepository] = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    repository = repository or SQLRepository()

    app = FastAPI(title="Story API")
    app.add_middleware(RequestLogMiddleware)

    app.state.settings = settings
    app.state.user_service = UserService(repository)
    app.state.story_service = StoryService(repository)
    app.state.blog_service = BlogService(repository)
    app.state.auth_service = AuthService(repository=repository)

    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return success_response({"status": "ok", "env": settings.app_env})

    app.include_router(users_router.router)
    app.include_router(stories_router.router)
    app.include_router(blogs_router.router)
    app.include_router(auth_router.router)
    return app
