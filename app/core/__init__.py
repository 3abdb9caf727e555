"""Core application components."""

from app.core.config import settings
from app.core.exceptions import ApplicationError, GatewayError
from app.core.storage import Base, async_session, init_models

__all__ = [
    "ApplicationError",
    "Base",
    "GatewayError",
    "async_session",
    "init_models",
    "settings",
]
