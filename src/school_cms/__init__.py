"""School website CMS backend: content CRUD with upload-coupled attachments."""

from .exceptions import AuthError, NotFoundError, SchoolCmsError

__version__ = "0.1.0"

__all__ = ["AuthError", "NotFoundError", "SchoolCmsError", "__version__"]
