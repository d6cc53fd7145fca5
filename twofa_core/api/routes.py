"""
Auth Endpoints
==============
POST /api/register, /api/login, /api/verify-otp and /api/reset.

Every response carries ``message`` (display text, legacy substring
contract) and ``status`` (machine-readable outcome). HTTP status codes
follow the outcome; clients that read only the body keep working.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from twofa_core.auth import AuthAttemptResult, AuthService, AuthStatus
from .schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetRequest,
    VerifyOtpRequest,
)

router = APIRouter(prefix="/api", tags=["Authentication"])

HTTP_STATUS_BY_AUTH_STATUS = {
    AuthStatus.REGISTERED: status.HTTP_201_CREATED,
    AuthStatus.USERNAME_TAKEN: status.HTTP_409_CONFLICT,
    AuthStatus.REGISTRATION_FAILED: status.HTTP_400_BAD_REQUEST,
    AuthStatus.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    AuthStatus.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthStatus.OTP_SENT: status.HTTP_200_OK,
    AuthStatus.OTP_DELIVERY_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthStatus.AUTHENTICATED: status.HTTP_200_OK,
    AuthStatus.OTP_INVALID: status.HTTP_401_UNAUTHORIZED,
    AuthStatus.OTP_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    AuthStatus.RESET: status.HTTP_200_OK,
    AuthStatus.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_ERROR_RESPONSES = {
    400: {"model": MessageResponse, "description": "Invalid input"},
    401: {"model": AuthResponse, "description": "Authentication failed"},
    503: {"model": AuthResponse, "description": "Storage unavailable"},
}


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the service attached by ``create_app``."""
    return request.app.state.auth_service


def _respond(result: AuthAttemptResult) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS_BY_AUTH_STATUS[result.status],
        content=result.to_dict(),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERROR_RESPONSES, 409: {"model": AuthResponse, "description": "Username taken"}},
)
async def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Register a username/password account."""
    return _respond(await service.register(body.username, body.password))


@router.post("/login", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Verify the password and send an OTP.

    On success the message contains "OTP sent" and the body carries the
    ``challenge_id`` to echo back on /api/verify-otp.
    """
    return _respond(await service.login(body.username, body.password))


@router.post("/verify-otp", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def verify_otp(body: VerifyOtpRequest, service: AuthService = Depends(get_auth_service)):
    """Complete the login with the one-time code."""
    return _respond(await service.verify_otp(body.username, body.otp, body.challenge_id))


@router.post("/reset", response_model=AuthResponse)
async def reset(body: ResetRequest, service: AuthService = Depends(get_auth_service)):
    """Back to login: drop any pending OTP for the username."""
    return _respond(await service.reset(body.username))
