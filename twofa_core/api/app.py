"""
Application factory.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from twofa_core import __version__
from twofa_core.auth import AuthService
from twofa_core.config import AuthConfig
from twofa_core.logging_config import RequestLoggingMiddleware
from .errors import register_exception_handlers
from .health import create_health_router
from .routes import router as auth_router

logger = structlog.get_logger(__name__)


def create_app(
    config: Optional[AuthConfig] = None,
    service: Optional[AuthService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration; read from the environment if omitted
        service: Pre-built AuthService (tests inject stores through this)

    Returns:
        Configured FastAPI app with the service on ``app.state.auth_service``
    """
    config = config or (service.config if service else AuthConfig.from_env())
    service = service or AuthService(config)

    app = FastAPI(
        title="twofa-core",
        description="Username/password login with a one-time passcode second factor.",
        version=__version__,
    )
    app.state.auth_service = service
    app.state.config = config

    allow_all = config.cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(create_health_router(config.service_name, __version__))

    logger.info(
        "Application created",
        service=config.service_name,
        otp_validity_seconds=config.otp_validity_seconds,
        password_scheme=config.password_scheme,
    )
    return app
