"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager
from typing import Mapping, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import generate as generate_api
from backend.app.core.error_handling import create_error_response, log_error_with_context
from backend.app.generation.factory import build_generation_service
from backend.app.generation.service import ObjectGenerationService
from shared.runtime_settings import load_runtime_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(
    service: Optional[ObjectGenerationService] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> FastAPI:
    """Build the API app. ``service`` is injected by tests; otherwise built from the environment."""
    settings = load_runtime_settings(environ)
    if service is None:
        service = build_generation_service(environ)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.dev_mode and settings.allows_any_origin:
            raise RuntimeError(
                "Unsafe CORS config: '*' is only allowed in dev mode. "
                "Set REALMSMITH_CORS_ALLOW_ORIGINS to explicit origins."
            )
        logger.info(
            "API startup complete (dev_mode=%s, object_types=%d, live_providers=%s)",
            settings.dev_mode,
            len(service.registry),
            service.gateway.live_providers,
        )
        yield
        service.gateway.close()

    app = FastAPI(title="Realmsmith API", version=API_VERSION, lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    generate_api.install_error_handlers(app)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Unexpected errors: log with context, return a structured 500."""
        object_type = request.path_params.get("object_type") if hasattr(request, "path_params") else None
        log_error_with_context(
            error=exc,
            stage="api",
            object_type=object_type,
            extra_context={
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
            },
        )
        message = str(exc) or f"An error occurred: {type(exc).__name__}"
        error_response = create_error_response(
            error_code="API_ERROR",
            message=message,
            node="api",
            details={"exception_type": type(exc).__name__, "path": request.url.path},
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_response)

    app.include_router(generate_api.router)

    @app.get("/")
    async def root():
        return {"message": "Realmsmith API", "version": API_VERSION}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
