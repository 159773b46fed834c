"""
Router Dependencies
Database handle injection and bearer-token authentication
"""

from fastapi import Depends, Request

from ..services.auth import AuthService
from ..services.database import Database, get_database
from ..utils.exceptions import AuthenticationError


def _extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return ""


async def get_current_user_id(request: Request, db: Database = Depends(get_database)) -> str:
    """Resolve the user id carried by the request's bearer token."""
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationError("Access token required")
    return AuthService(db).verify_token(token)
