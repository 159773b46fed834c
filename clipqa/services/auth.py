"""
Auth Service
User registration, login and signed bearer tokens.
"""

import asyncio
import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Optional

import aiosqlite

from ..config import get_settings
from ..models.user import AuthResult, User
from ..utils.exceptions import AuthenticationError, ConflictError, ValidationError
from ..utils.logger import get_logger
from .database import Database, new_id, utcnow

logger = get_logger()

_SCRYPT_N = 2 ** 14
_SCRYPT_R = 8
_SCRYPT_P = 1


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Salted scrypt hash in the form ``scrypt$<salt hex>$<hash hex>``."""
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.scrypt(password.encode("utf-8"), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P)
    return f"scrypt${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, salt_hex, digest_hex = stored.split("$")
    except ValueError:
        return False
    if scheme != "scrypt":
        return False
    candidate = hash_password(password, bytes.fromhex(salt_hex))
    return hmac.compare_digest(candidate.split("$")[2], digest_hex)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


class AuthService:
    """Accounts and the tokens that identify them"""

    def __init__(self, db: Database):
        self.db = db
        self.settings = get_settings()

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def _sign(self, payload: str) -> str:
        mac = hmac.new(self.settings.secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256)
        return _b64encode(mac.digest())

    def issue_token(self, user_id: str, now: Optional[float] = None) -> str:
        """Token of the form ``<payload>.<signature>`` carrying sub and exp."""
        issued = now if now is not None else time.time()
        claims = {"sub": user_id, "exp": int(issued + self.settings.token_ttl_hours * 3600)}
        payload = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{self._sign(payload)}"

    def verify_token(self, token: str, now: Optional[float] = None) -> str:
        """Return the user id a token identifies."""
        try:
            payload, signature = token.split(".")
        except (AttributeError, ValueError):
            raise AuthenticationError("Malformed token")

        if not hmac.compare_digest(signature.encode("utf-8"), self._sign(payload).encode("utf-8")):
            raise AuthenticationError("Invalid token signature")

        try:
            claims = json.loads(_b64decode(payload))
        except ValueError:
            raise AuthenticationError("Malformed token")
        if not isinstance(claims, dict):
            raise AuthenticationError("Malformed token")

        current = now if now is not None else time.time()
        if claims.get("exp", 0) < current:
            raise AuthenticationError("Token expired")
        if not claims.get("sub"):
            raise AuthenticationError("Malformed token")
        return claims["sub"]

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def register(self, username: str, password: str) -> AuthResult:
        if not username or not password:
            raise ValidationError("Username and password are required")
        if len(username) < 3 or len(username) > 50:
            raise ValidationError("Username must be between 3 and 50 characters", field="username")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters", field="password")

        now = utcnow()
        user = User(id=new_id(), username=username, created_at=now)
        loop = asyncio.get_event_loop()
        password_hash = await loop.run_in_executor(None, hash_password, password)

        async with self.db.transaction("register") as conn:
            try:
                await conn.execute(
                    "INSERT INTO users (id, username, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (user.id, user.username, password_hash, now),
                )
            except aiosqlite.IntegrityError:
                raise ConflictError("Username already exists", field="username")

        logger.info(f"Registered user {username}")
        return AuthResult(token=self.issue_token(user.id), user=user)

    async def login(self, username: str, password: str) -> AuthResult:
        if not username or not password:
            raise ValidationError("Username and password are required")

        async with self.db.connect() as conn:
            cursor = await conn.execute("SELECT * FROM users WHERE username = ?", (username,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise AuthenticationError("Invalid credentials")

        # scrypt is CPU-bound; keep it off the event loop and outside the write lock
        loop = asyncio.get_event_loop()
        if not await loop.run_in_executor(None, verify_password, password, row["password_hash"]):
            raise AuthenticationError("Invalid credentials")

        last_login = utcnow()
        async with self.db.transaction("login") as conn:
            await conn.execute("UPDATE users SET last_login = ? WHERE id = ?", (last_login, row["id"]))

        user = User(id=row["id"], username=row["username"], created_at=row["created_at"], last_login=last_login)
        return AuthResult(token=self.issue_token(user.id), user=user)

    async def get_user(self, user_id: str) -> User:
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                "SELECT id, username, created_at, last_login FROM users WHERE id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise AuthenticationError("Unknown user")
        return User(**dict(row))
