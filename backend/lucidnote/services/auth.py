"""
Email/password accounts and bearer-token sessions.
"""

import hashlib
import hmac
import re
import secrets
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import aiosqlite

from lucidnote.database.db import connect
from lucidnote.errors import AuthError, StoreError, ValidationError
from lucidnote.logging import get_logger
from lucidnote.models import Profile, Session

logger = get_logger('services.auth')

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PBKDF2_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 6


def _now() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, expected = stored.partition("$")
    if not expected:
        return False
    candidate = hash_password(password, salt).partition("$")[2]
    return hmac.compare_digest(candidate, expected)


class AuthService:
    """Service for sign-up, sign-in and session lookup."""

    def __init__(self, db_path: str, session_ttl_seconds: int):
        self.db_path = db_path
        self.session_ttl = timedelta(seconds=session_ttl_seconds)

    def _validate(self, email: str, password: str) -> str:
        email = (email or "").strip().lower()
        if not _EMAIL_RE.match(email):
            raise ValidationError("A valid email address is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return email

    async def _issue_session(self, db: aiosqlite.Connection, user_id: str, email: str) -> Session:
        now = _now()
        session = Session(
            access_token=secrets.token_urlsafe(32),
            user_id=user_id,
            email=email,
            expires_at=now + self.session_ttl,
        )
        await db.execute(
            "INSERT INTO sessions (access_token, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
            (session.access_token, user_id, now.isoformat(), session.expires_at.isoformat()),
        )
        await db.commit()
        return session

    async def sign_up(self, email: str, password: str) -> Session:
        email = self._validate(email, password)
        user_id = str(uuid4())
        try:
            db = await connect(self.db_path)
            try:
                await db.execute(
                    "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (user_id, email, hash_password(password), _now().isoformat()),
                )
                session = await self._issue_session(db, user_id, email)
            finally:
                await db.close()
        except aiosqlite.IntegrityError as e:
            raise ValidationError("An account with this email already exists") from e
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        logger.info(f"Created account {user_id[:8]}")
        return session

    async def sign_in(self, email: str, password: str) -> Session:
        email = (email or "").strip().lower()
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(
                    "SELECT id, password_hash FROM users WHERE email = ?", (email,)
                )
                row = await cursor.fetchone()
                if not row or not verify_password(password or "", row["password_hash"]):
                    raise AuthError("Invalid login credentials")
                return await self._issue_session(db, row["id"], email)
            finally:
                await db.close()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e

    async def sign_out(self, access_token: str) -> None:
        try:
            db = await connect(self.db_path)
            try:
                await db.execute("DELETE FROM sessions WHERE access_token = ?", (access_token,))
                await db.commit()
            finally:
                await db.close()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e

    async def get_session(self, access_token: str | None) -> Session | None:
        if not access_token:
            return None
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(
                    """SELECT s.access_token, s.user_id, s.expires_at, u.email
                       FROM sessions s JOIN users u ON u.id = s.user_id
                       WHERE s.access_token = ?""",
                    (access_token,),
                )
                row = await cursor.fetchone()
                if not row:
                    return None
                expires_at = datetime.fromisoformat(row["expires_at"])
                if expires_at <= _now():
                    await db.execute("DELETE FROM sessions WHERE access_token = ?", (access_token,))
                    await db.commit()
                    return None
                return Session(
                    access_token=row["access_token"],
                    user_id=row["user_id"],
                    email=row["email"],
                    expires_at=expires_at,
                )
            finally:
                await db.close()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e

    async def get_profile(self, session: Session | None) -> Profile:
        if session is None:
            raise AuthError("User not authenticated")
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(
                    "SELECT id, email, created_at FROM users WHERE id = ?", (session.user_id,)
                )
                row = await cursor.fetchone()
            finally:
                await db.close()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        if not row:
            raise AuthError("User not authenticated")
        return Profile(id=row["id"], email=row["email"], created_at=row["created_at"])
