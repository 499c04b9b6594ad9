"""FastAPI application for the userhub API."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from userhub.core.config import get_settings
from userhub.domain.errors import Conflict, InvalidInput, NotFound, UserhubError
from userhub.routers import binary_contents as binary_contents_router
from userhub.routers import user_statuses as user_statuses_router
from userhub.routers import users as users_router
from userhub.services.binary_content_service import BinaryContentService
from userhub.services.user_service import UserService
from userhub.services.user_status_service import UserStatusService

logger = logging.getLogger(__name__)


def _status_code_for(exc: UserhubError) -> int:
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, Conflict):
        return 409
    if isinstance(exc, InvalidInput):
        return 400
    return 500


async def _handle_userhub_error(request: Request, exc: UserhubError) -> JSONResponse:
    status_code = _status_code_for(exc)
    if status_code >= 500:
        logger.error("Unhandled service error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn userhub.app:create_app --factory``)."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    app = FastAPI(title="Userhub API")
    app.state.user_service = UserService()
    app.state.user_status_service = UserStatusService()
    app.state.binary_content_service = BinaryContentService()
    app.add_exception_handler(UserhubError, _handle_userhub_error)

    app.include_router(users_router.router)
    app.include_router(user_statuses_router.router)
    app.include_router(binary_contents_router.router)
    return app
