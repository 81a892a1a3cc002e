from __future__ import annotations

from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from school_cms.content.models import Admin
from school_cms.content.schemas import LoginIn, TokenOut
from school_cms.db import UoWDep
from school_cms.exceptions import AuthError

from .security import create_access_token, decode_access_token
from .service import authenticate
from .settings import AuthSettings, get_auth_settings

_bearer = HTTPBearer(auto_error=False)


def auth_settings(request: Request) -> AuthSettings:
    return getattr(request.app.state, "auth_settings", None) or get_auth_settings()


AuthSettingsDep = Annotated[AuthSettings, Depends(auth_settings)]


async def require_admin(
    settings: AuthSettingsDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> dict[str, Any]:
    if credentials is None or not credentials.credentials:
        raise AuthError("Access denied")
    return decode_access_token(credentials.credentials, settings)


AdminClaims = Annotated[dict[str, Any], Depends(require_admin)]

router = APIRouter(tags=["admin"])


@router.post("/admin/login", response_model=TokenOut)
async def login(body: LoginIn, uow: UoWDep, settings: AuthSettingsDep):
    admin = await authenticate(uow.repo(Admin), body.username, body.password)
    if admin is None:
        raise AuthError("Invalid username or password")
    return TokenOut(token=create_access_token(admin.username, settings))


@router.get("/api/admin/secure-data")
async def secure_data(claims: AdminClaims):
    return {"message": "This is secured data for admin", "admin": claims["sub"]}
