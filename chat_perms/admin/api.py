"""Admin HTTP surface -- read and update the plugin settings."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from chat_perms import __version__

if TYPE_CHECKING:
    from chat_perms.admin.service import SettingsAdminService
    from chat_perms.factory import ServiceContainer

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/api/admin/plugins/chat-perms"


def _error_response(error: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(error)})


def create_admin_router(service: SettingsAdminService) -> APIRouter:
    """Build the settings router bound to *service*."""
    router = APIRouter(tags=["chat-perms"])

    @router.get("/settings")
    async def get_settings() -> JSONResponse:
        try:
            return JSONResponse(content=service.get_settings())
        except Exception as e:
            logger.error(f"Failed to read settings: {e}", exc_info=True)
            return _error_response(e)

    @router.put("/settings")
    async def put_settings(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
            saved = await service.save_settings(payload)
        except Exception as e:
            logger.error(f"Failed to save settings: {e}", exc_info=True)
            return _error_response(e)
        return JSONResponse(content={"success": True, "settings": saved})

    return router


def create_app(container: ServiceContainer) -> FastAPI:
    """FastAPI app exposing the admin router under ``ADMIN_PREFIX``."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await container.plugin.initialize()
        yield
        await container.plugin.shutdown()

    app = FastAPI(
        title="chat-perms admin",
        description="Settings API for the chat permissions plugin.",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(create_admin_router(container.admin), prefix=ADMIN_PREFIX)
    return app
