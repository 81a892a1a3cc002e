from __future__ import annotations

import logging
from typing import Optional

from school_cms.content.models import Admin
from school_cms.db.repository import Repository
from school_cms.exceptions import SchoolCmsError

from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


async def find_admin(repo: Repository[Admin], username: str) -> Optional[Admin]:
    rows = await repo.list(where={"username": username}, limit=1)
    return rows[0] if rows else None


async def create_admin(repo: Repository[Admin], username: str, password: str) -> Admin:
    if await find_admin(repo, username) is not None:
        raise SchoolCmsError(f"Admin {username!r} already exists", status_code=409)
    admin = await repo.create(username=username, password_hash=hash_password(password))
    logger.info("Created admin %s", username)
    return admin


async def authenticate(repo: Repository[Admin], username: str, password: str) -> Optional[Admin]:
    admin = await find_admin(repo, username)
    if admin is None or not verify_password(password, admin.password_hash):
        logger.info("Failed login for %s", username)
        return None
    return admin
