"""
HTTP API
========
FastAPI application exposing register/login/verify-otp as JSON endpoints.

Run with:
    uvicorn twofa_core.api:create_app --factory --port 8080
"""

from .app import create_app
from .routes import router, get_auth_service, HTTP_STATUS_BY_AUTH_STATUS
from .health import create_health_router

__all__ = [
    "create_app",
    "router",
    "get_auth_service",
    "HTTP_STATUS_BY_AUTH_STATUS",
    "create_health_router",
]
