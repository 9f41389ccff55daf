"""
TaskNest API - Security Validation

Startup checks for security-relevant configuration.
"""

import warnings

from tasknest.config import settings


class SecurityConfigError(RuntimeError):
    """Raised when the service cannot start safely."""


def validate_security_config() -> None:
    """
    Validate security configuration on startup.

    A missing signing secret is fatal: the service must never run without a
    key to sign and verify bearer tokens. Weaker settings only issue warnings.
    """
    if not settings.JWT_SECRET_KEY:
        raise SecurityConfigError(
            "JWT_SECRET_KEY is not set. Configure a signing secret before starting the service."
        )

    # CORS validation
    if "*" in settings.CORS_ORIGINS:
        warnings.warn(
            "SECURITY WARNING: CORS wildcard (*) detected. "
            "Set specific origins via CORS_ORIGINS.",
            UserWarning,
        )

    # JWT Secret Key strength (basic check)
    if len(settings.JWT_SECRET_KEY) < 32:
        warnings.warn(
            "SECURITY WARNING: JWT_SECRET_KEY is shorter than 32 characters.",
            UserWarning,
        )
