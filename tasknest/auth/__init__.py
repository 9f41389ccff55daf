"""
TaskNest API - Authentication Module

Register/login with JWT bearer tokens.
"""

from tasknest.auth.router import router as auth_router
from tasknest.auth.dependencies import get_current_identity, CurrentIdentity

__all__ = ["auth_router", "get_current_identity", "CurrentIdentity"]
