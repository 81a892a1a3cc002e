"""Base exceptions for school-cms.

Every domain error raised by the package derives from ``SchoolCmsError`` so
API layers can translate them in one place.
"""

from __future__ import annotations


class SchoolCmsError(Exception):
    """Root of all school-cms errors."""

    status_code: int = 500

    def __init__(self, message: str = "", *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(SchoolCmsError):
    """A referenced record does not exist."""

    status_code = 404


class AuthError(SchoolCmsError):
    """Missing, invalid or expired admin credentials."""

    status_code = 401


__all__ = ["SchoolCmsError", "NotFoundError", "AuthError"]
