# src/safetravel/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance, attaches the service container and the
request log middleware. Endpoints live in `safetravel.api.routes`.

Run with: `uvicorn safetravel.api.app:app`
"""

from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from safetravel.config.settings import get_settings
from safetravel.core.logging import configure_logging

from .deps import Services, build_services
from .routes import router

logger = logging.getLogger("safetravel.api")


def create_app(services: Services | None = None) -> FastAPI:
    app = FastAPI(title="SafeTravel API", version="0.1.0")
    app.state.services = services or build_services(get_settings())

    # CORS: SAFETRAVEL_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
    cors_origins = [s.strip() for s in os.getenv("SAFETRAVEL_CORS_ORIGINS", "").split(",") if s.strip()]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.info("%s %s %s in %dms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else str(first.get("msg", "invalid request"))
        return JSONResponse(status_code=400, content={"detail": {"code": "VALIDATION_ERROR", "message": message}})

    app.include_router(router)
    return app


configure_logging()

app = create_app()
