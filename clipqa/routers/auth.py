"""
Auth Router
Registration, login and the current user's profile
"""

from fastapi import APIRouter, Depends, status

from ..models.user import AuthResult, User, UserCredentials
from ..services.auth import AuthService
from ..services.database import Database, get_database
from .deps import get_current_user_id

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
async def register(credentials: UserCredentials, db: Database = Depends(get_database)):
    """Create an account and return its token."""
    return await AuthService(db).register(credentials.username, credentials.password)


@router.post("/login", response_model=AuthResult)
async def login(credentials: UserCredentials, db: Database = Depends(get_database)):
    """Exchange a username and password for a token."""
    return await AuthService(db).login(credentials.username, credentials.password)


@router.get("/me", response_model=User)
async def me(user_id: str = Depends(get_current_user_id), db: Database = Depends(get_database)):
    return await AuthService(db).get_user(user_id)
