"""
Health Check Module
===================
Liveness/readiness probes with per-store component status.
"""

import time
from enum import Enum
from typing import Awaitable, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import structlog

from twofa_core.auth import AuthService, messages
from .schemas import MessageResponse

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    components: Dict[str, ComponentHealth]
    timestamp: float


async def _timed(component: str, check: Awaitable) -> ComponentHealth:
    started = time.perf_counter()
    try:
        await check
    except Exception as e:
        logger.error("Health check failed", component=component, error=str(e))
        return ComponentHealth(status="error", error=str(e))
    elapsed_ms = (time.perf_counter() - started) * 1000
    return ComponentHealth(status="connected", latency_ms=round(elapsed_ms, 2))


async def check_credential_store(service: AuthService) -> ComponentHealth:
    """The credential store answers a read; the result itself is ignored."""
    return await _timed("credential_store", service.credentials.lookup("__health__"))


async def check_otp_store(service: AuthService) -> ComponentHealth:
    """The OTP store answers; expired entries are collected on the way."""
    return await _timed("otp_store", service.otps.purge_expired())


def create_health_router(service_name: str, version: str = "1.0.0") -> APIRouter:
    """
    Create a health check router.

    Args:
        service_name: Name of the service (e.g., "twofa-core")
        version: Service version

    Returns:
        Router with /health, /health/live, /health/ready and the legacy
        /api/health endpoint
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Health check with the status of both stores."""
        service: AuthService = request.app.state.auth_service
        components: Dict[str, ComponentHealth] = {
            "credential_store": await check_credential_store(service),
            "otp_store": await check_otp_store(service),
        }

        overall_status = HealthStatus.HEALTHY
        if any(c.status == "error" for c in components.values()):
            overall_status = HealthStatus.UNHEALTHY

        return HealthResponse(
            status=overall_status,
            service=service_name,
            version=version,
            components=components,
            timestamp=time.time(),
        )

    @router.get("/health/live")
    async def liveness_probe():
        """The process is up; no store is touched."""
        return {"status": "alive"}

    @router.get("/health/ready")
    async def readiness_probe(request: Request):
        """Ready once the credential store answers; logins are impossible without it."""
        service: AuthService = request.app.state.auth_service
        store_health = await check_credential_store(service)
        if store_health.status == "error":
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "reason": "credential_store_unavailable"},
            )
        return {"status": "ready"}

    @router.get("/api/health", response_model=MessageResponse)
    async def api_health():
        return MessageResponse(message=messages.BACKEND_RUNNING)

    return router
