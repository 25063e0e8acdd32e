# Overview: Bearer-token sessions; resolves a request token to its principal.

"""
Session Token Resolution

Tokens are high-entropy random strings; only their SHA-256 hash is stored.

Validation is read-only: an expired or revoked token, or one whose principal
is inactive or soft-deleted, simply resolves to None.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from insights.extensions import db
from insights.errors import NotFoundError
from insights.models import SessionToken, User
from insights.time_utils import utcnow


SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)


@dataclass
class SessionContext:
    user: User
    session: SessionToken


def generate_token() -> str:
    """64-character hex string (32 bytes of entropy). Never stored."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_session(user_id: int, lifetime: timedelta = SESSION_ABSOLUTE_TIMEOUT) -> tuple[SessionToken, str]:
    """
    Issue a token for a principal.

    Returns (session_record, plaintext_token). Used by the operator CLI and
    tests; regular login lives outside this engine.
    """
    user = db.session.query(User).filter(
        User.id == user_id,
        User.deleted_at.is_(None),
    ).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")

    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        user_id=user.id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        expires_at=now + lifetime,
        is_revoked=False,
    )
    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def validate_session(token: str) -> SessionContext | None:
    """Return the SessionContext for a live token, or None."""
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()
    if not session:
        return None

    if session.expires_at < utcnow():
        return None

    user = session.user
    if not user or not user.is_active or user.is_deleted:
        return None

    return SessionContext(user=user, session=session)


def revoke_session(token: str) -> bool:
    """Revoke a token. Returns False if it was not active."""
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()
    if not session:
        return False

    session.is_revoked = True
    session.revoked_at = utcnow()
    db.session.commit()
    return True
