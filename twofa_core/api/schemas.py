"""
Request/response schemas for the auth endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., max_length=150)
    password: str = Field(..., max_length=1024)


class LoginRequest(BaseModel):
    username: str = Field(..., max_length=150)
    password: str = Field(..., max_length=1024)


class VerifyOtpRequest(BaseModel):
    username: str = Field(..., max_length=150)
    otp: str = Field(..., max_length=32)
    challenge_id: Optional[str] = Field(
        None,
        max_length=128,
        description="Identifier returned by /api/login; binds the code to that login attempt",
    )


class ResetRequest(BaseModel):
    username: str = Field("", max_length=150)


class MessageResponse(BaseModel):
    message: str


class AuthResponse(BaseModel):
    """
    ``message`` is for display and legacy substring matching;
    ``status`` is the stable machine-readable outcome.
    """
    message: str
    status: str
    state: str
    challenge_id: Optional[str] = None
    expires_in: Optional[int] = None
