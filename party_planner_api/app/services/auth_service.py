"""
Credential checks and session token issuance.

Both login flows return the same ``AuthResponse``.  Failed password
logins always surface as the same ``AuthenticationFailed`` error; the
actual reason (unknown user, wrong password, unverified account) is
only written to the log.
"""

import logging
import re
import sqlite3

from fastapi.concurrency import run_in_threadpool

from ..core.db import Database, new_id, utcnow
from ..core.errors import AuthenticationFailed, InvalidExternalToken
from ..core.security import issue_session_token, verify_password
from ..schemas.auth import AuthResponse
from ..schemas.user import Role
from .identity import GoogleIdentityVerifier

logger = logging.getLogger(__name__)

# Role given to accounts created on first Google sign-in
EXTERNAL_DEFAULT_ROLE = Role.BASE_USER


def _auth_response(row: sqlite3.Row) -> AuthResponse:
    role = Role(row["role"])
    return AuthResponse(
        token=issue_session_token(row["id"], role),
        id=row["id"],
        username=row["username"],
        role=role,
        profile_picture=row["profile_picture"] or "",
    )


def _free_username(conn: sqlite3.Connection, wanted: str) -> str:
    base = re.sub(r"\s+", "_", wanted.strip()) or "user"
    candidate = base
    suffix = 1
    while conn.execute("SELECT 1 FROM users WHERE username = ?", (candidate,)).fetchone():
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


class AuthService:
    """Login with a password or with a Google ID token."""

    @classmethod
    async def authenticate(cls, db: Database, username: str, password: str) -> AuthResponse:
        row = await db.run(
            lambda conn: conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
        )
        if row is None:
            logger.warning("Login failed for %s: unknown user", username)
            raise AuthenticationFailed()
        if not await run_in_threadpool(verify_password, password, row["password"]):
            logger.warning("Login failed for %s: wrong password", username)
            raise AuthenticationFailed()
        if not row["verified"]:
            logger.warning("Login failed for %s: account not verified", username)
            raise AuthenticationFailed()
        logger.info("User %s logged in", row["id"])
        return _auth_response(row)

    @classmethod
    async def authenticate_with_external_identity(
        cls,
        db: Database,
        verifier: GoogleIdentityVerifier,
        id_token: str,
    ) -> AuthResponse:
        """Log in with a Google ID token, creating the account on first use.

        Accounts created here are verified, since Google already attests
        the e-mail address.
        """
        claims = await run_in_threadpool(verifier.verify, id_token)
        email = claims.get("email")
        if not email:
            raise InvalidExternalToken()

        def _find_or_create(conn: sqlite3.Connection) -> sqlite3.Row:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            if row:
                return row
            user_id = new_id()
            display_name = claims.get("name") or email.split("@", 1)[0]
            conn.execute(
                """
                INSERT INTO users (id, username, email, password, name, gender, notification_preference,
                                   role, profile_picture, verified, verification_token, registered_at)
                VALUES (?, ?, ?, NULL, ?, '', '', ?, ?, 1, NULL, ?)
                """,
                (
                    user_id,
                    _free_username(conn, display_name),
                    email,
                    display_name,
                    EXTERNAL_DEFAULT_ROLE.value,
                    claims.get("picture") or "",
                    utcnow().isoformat(),
                ),
            )
            logger.info("Created account %s for Google user %s", user_id, email)
            return conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

        row = await db.run(_find_or_create, write=True)
        return _auth_response(row)
