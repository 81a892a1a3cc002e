from .router import AdminClaims, require_admin, router
from .security import create_access_token, decode_access_token, hash_password, verify_password
from .service import authenticate, create_admin
from .settings import AuthSettings, get_auth_settings

__all__ = [
    "AdminClaims",
    "AuthSettings",
    "authenticate",
    "create_access_token",
    "create_admin",
    "decode_access_token",
    "get_auth_settings",
    "hash_password",
    "require_admin",
    "router",
    "verify_password",
]
