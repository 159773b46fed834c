"""
User Data Models
Accounts that view clips and author questions
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserCredentials(BaseModel):
    """Request model for register and login"""
    username: str
    password: str


class User(BaseModel):
    """Public user record (never carries the password hash)"""
    id: str
    username: str
    created_at: datetime
    last_login: Optional[datetime] = None


class AuthResult(BaseModel):
    """Token plus the user it identifies"""
    token: str
    user: User
