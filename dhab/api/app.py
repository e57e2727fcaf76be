"""
FastAPI application for Dhab.

Usage:
    uvicorn dhab.api.app:app
or:
    python scripts/serve.py
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dhab import __version__
from dhab.api import auth, community, sobriety
from dhab.core.addictions import filter_categories, search_addictions
from dhab.core.config import Config
from dhab.core.db import init_db

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use; loaded from the environment if omitted.

    Returns:
        Configured app with tables created.
    """
    if config is None:
        load_dotenv()
        config = Config.from_env()

    app = FastAPI(
        title="Dhab",
        description="Sobriety timer with an anonymous recovery community",
        version=__version__,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    init_db(config)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.errors()}")
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} error")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.get("/health")
    def health():
        return {"ok": True, "mode": config.mode}

    @app.get("/api/addictions")
    def addictions(q: str = Query("")):
        """Habit catalog, optionally narrowed by a search query."""
        return {
            "categories": [c.to_dict() for c in filter_categories(q)],
            "matches": search_addictions(q) if q else [],
        }

    app.include_router(sobriety.router)
    app.include_router(community.router)
    app.include_router(auth.router)

    logger.info(f"Dhab API ready ({config.mode})")
    return app


def __getattr__(name: str):
    # Lazily build the module-level app for `uvicorn dhab.api.app:app`
    if name == "app":
        return create_app()
    raise AttributeError(name)
