"""
Service Configuration
=====================
Configuration for the two-factor authentication service, loaded from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import List

PASSWORD_SCHEMES = ("argon2", "bcrypt")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AuthConfig:
    """Configuration for the authentication service."""
    service_name: str = "twofa-core"
    version: str = "1.0.0"

    # OTP
    otp_length: int = 6
    otp_validity_seconds: int = 120  # 2 minutes

    # Password hashing
    password_scheme: str = "argon2"
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536  # 64MB
    argon2_parallelism: int = 4
    bcrypt_rounds: int = 12

    # Storage
    storage_read_retries: int = 1
    storage_retry_delay: float = 0.05

    # HTTP
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self):
        if self.password_scheme not in PASSWORD_SCHEMES:
            raise ValueError(
                f"password_scheme must be one of {PASSWORD_SCHEMES}, got {self.password_scheme!r}"
            )
        if self.otp_length < 4 or self.otp_length > 10:
            raise ValueError("otp_length must be between 4 and 10")
        if self.otp_validity_seconds <= 0:
            raise ValueError("otp_validity_seconds must be positive")
        if self.storage_read_retries < 0:
            raise ValueError("storage_read_retries cannot be negative")

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """
        Build a config from environment variables.

        Unset variables fall back to the dataclass defaults.
        """
        origins = os.getenv("TWOFA_CORS_ORIGINS", "*")
        return cls(
            service_name=os.getenv("TWOFA_SERVICE_NAME", "twofa-core"),
            otp_length=_env_int("TWOFA_OTP_LENGTH", 6),
            otp_validity_seconds=_env_int("TWOFA_OTP_VALIDITY_SECONDS", 120),
            password_scheme=os.getenv("TWOFA_PASSWORD_SCHEME", "argon2").lower(),
            argon2_time_cost=_env_int("TWOFA_ARGON2_TIME_COST", 3),
            argon2_memory_cost=_env_int("TWOFA_ARGON2_MEMORY_COST", 65536),
            argon2_parallelism=_env_int("TWOFA_ARGON2_PARALLELISM", 4),
            bcrypt_rounds=_env_int("TWOFA_BCRYPT_ROUNDS", 12),
            storage_read_retries=_env_int("TWOFA_STORAGE_READ_RETRIES", 1),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            host=os.getenv("TWOFA_HOST", "0.0.0.0"),
            port=_env_int("TWOFA_PORT", 8080),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_json=_env_bool("LOG_JSON", True),
        )
