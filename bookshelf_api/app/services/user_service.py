"""
Business logic for users.

``UserService`` registers accounts and exchanges credentials for
bearer tokens.  Passwords are stored as salted PBKDF2 hashes (see
``core.security``) and never leave this module; every user returned to
callers is a ``UserRead`` without the hash.
"""

import logging
import sqlite3
from typing import Optional

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.db import Database
from bookshelf_api.app.core.exceptions import AuthError, ConflictError, ValidationError
from bookshelf_api.app.core.security import create_access_token, hash_password, verify_password
from bookshelf_api.app.schemas.user import Token, UserCreate, UserLogin, UserRead


logger = logging.getLogger(__name__)

USER_COLUMNS = "id, username, email, created_at"


class UserService:
    """Registration and login."""

    def __init__(self, db: Database, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    async def register(self, data: UserCreate) -> UserRead:
        """Create a new user.

        Username and email must both be unused.  The lookup below is a
        fast path; the UNIQUE constraints on the table decide races
        between concurrent registrations, and a violation there is
        reported the same way.
        """
        username = (data.username or "").strip()
        email = (data.email or "").strip()
        if not username or not email or not data.password:
            raise ValidationError("Username, email, and password are required")

        conn = self.db.get_connection()
        try:
            cursor = conn.cursor()
            if self._find_existing(conn, username, email):
                raise ConflictError("User with this username or email already exists")
            try:
                cursor.execute(
                    "INSERT INTO users (username, email, password) VALUES (?, ?, ?)",
                    (username, email, hash_password(data.password)),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ConflictError("User with this username or email already exists")
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered user %s (%s)", user_id, username)
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return self._row_to_user_read(row)
        finally:
            conn.close()

    async def authenticate(self, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match, otherwise ``None``."""
        conn = self.db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            return None
        return self._row_to_user_read(row)

    async def login(self, data: UserLogin) -> Token:
        """Exchange email and password for a signed access token.

        Unknown emails and wrong passwords produce the same error so
        that callers cannot discover which accounts exist.
        """
        email = (data.email or "").strip()
        if not email or not data.password:
            raise ValidationError("Email and password are required")
        user = await self.authenticate(email, data.password)
        if user is None:
            logger.warning("Failed login attempt for %s", email)
            raise AuthError("Invalid credentials")
        token = create_access_token(
            {"sub": str(user.id)},
            self.settings.jwt_secret,
            expires_delta=self.settings.access_token_expire_minutes * 60,
        )
        logger.info("User %s logged in", user.id)
        return Token(token=token)

    async def get_user(self, user_id: int) -> Optional[UserRead]:
        """Retrieve a user by ID."""
        conn = self.db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return self._row_to_user_read(row) if row else None
        finally:
            conn.close()

    @staticmethod
    def _find_existing(conn: sqlite3.Connection, username: str, email: str) -> Optional[sqlite3.Row]:
        return conn.execute(
            "SELECT id FROM users WHERE username = ? OR email = ? LIMIT 1",
            (username, email),
        ).fetchone()

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        return UserRead(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            created_at=row["created_at"],
        )
