import secrets
import time

import bcrypt

from delivery_tracker.config import settings

# In-memory session store: token -> session data. Sessions do not survive a restart.
_sessions: dict[str, dict] = {}


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _expired(session: dict, now: float) -> bool:
    return now - session["created_at"] > settings.SESSION_MAX_AGE


def purge_expired_sessions() -> int:
    """Drop every expired session. Returns how many were removed."""
    now = time.time()
    stale = [token for token, session in _sessions.items() if _expired(session, now)]
    for token in stale:
        del _sessions[token]
    return len(stale)


def create_session(user_id: int, username: str) -> str:
    """Create a new session and return the session token."""
    purge_expired_sessions()
    token = secrets.token_urlsafe(32)
    _sessions[token] = {
        "user_id": user_id,
        "username": username,
        "created_at": time.time(),
    }
    return token


def validate_session(token: str) -> dict | None:
    """Return the session data for a live token, or None if unknown/expired."""
    session = _sessions.get(token)
    if session is None:
        return None
    if _expired(session, time.time()):
        _sessions.pop(token, None)
        return None
    return session


def destroy_session(token: str) -> None:
    _sessions.pop(token, None)
