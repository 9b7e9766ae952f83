from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from src.domain.errors import DomainError

logger = logging.getLogger(__name__)


def add_default_middlewares(app: FastAPI) -> None:
    # Development and staging allow the common local frontend origins
    env = os.getenv("ENV", "development")

    if env in ("development", "staging"):
        allowed_origins = [
            "http://localhost:3000",
            "http://localhost:5173",  # Vite default
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    else:
        allowed_origins = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )


def add_error_handlers(app: FastAPI) -> None:
    """Map the domain error taxonomy onto HTTP status codes."""

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_api_dict())
