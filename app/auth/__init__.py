from .backend import auth_backend
from .deps import current_active_user, current_user, fastapi_users

__all__ = [
    "auth_backend",
    "current_user",
    "current_active_user",
    "fastapi_users",
]
