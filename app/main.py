# app/main.py
import logging
import os
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.modules.notebook.services.backend import NotebookBackend, get_backend
from app.modules.router import router as modules_router
from core.conf import Settings, settings as default_settings
from core.logging import get_logger

logger = get_logger(__name__)


def wire_services(app: FastAPI, settings: Settings, backend: Optional[NotebookBackend] = None) -> None:
    """Wire settings and the notebook backend into app.state."""
    logger.info("Wiring notebook services...")
    app.state.settings = settings
    app.state.backend = backend if backend is not None else get_backend(settings)


def create_app(settings: Optional[Settings] = None, backend: Optional[NotebookBackend] = None) -> FastAPI:
    settings = settings or default_settings
    docs_enabled = settings.FASTAPI_DOCS_ENABLED
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    wire_services(app, settings, backend)

    # Middleware to log every request
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info(f"Incoming request: {request.method} {request.url.path}")
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        logger.info(f"Response status: {response.status_code} | Time: {process_time:.2f}ms")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=settings.CORS_EXPOSE_HEADERS,
    )

    app.include_router(modules_router, prefix=settings.FASTAPI_API_V1_PATH)

    @app.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
    async def root():
        return JSONResponse({
            "message": f"Welcome to {settings.PROJECT_NAME} API!",
            "mode": "demo" if settings.DEMO_MODE else "remote",
        })

    @app.api_route("/healthz", methods=["GET", "HEAD"], include_in_schema=False)
    async def healthz():
        return JSONResponse({"status": "ok"})

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting {settings.PROJECT_NAME} API ({'demo' if settings.DEMO_MODE else 'remote'} mode)")

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.backend.aclose()
        logger.info(f"{settings.PROJECT_NAME} API stopped")

    for route in app.routes:
        methods = getattr(route, "methods", None)
        if methods:
            logging.getLogger("router.map").debug("ROUTE %s %s", ",".join(sorted(methods)), route.path)

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port)
