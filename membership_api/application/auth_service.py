from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog

from ..domain.entities import SessionRecord, UserIdentity
from ..domain.errors import InvalidCredentialsError
from ..infrastructure.metrics import sessions_created_total, sessions_extended_total
from ..infrastructure.security import generate_session_token

logger = structlog.get_logger()


class ISessionStore:
    def create(self, user_id: str, token: str, expires_at: datetime) -> SessionRecord: ...
    def find_by_token(self, token: str) -> SessionRecord | None: ...
    def update_expiration(self, token: str, new_expiry: datetime) -> int: ...
    def delete_by_token(self, token: str) -> int: ...


class ICredentialSource:
    def get_row_by_email(self, email: str): ...


class IPasswordVerifier:
    def verify(self, plain: str, hashed: str) -> bool: ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def minutes_until(expires_at: datetime, now: datetime) -> int:
    """Whole minutes between now and expires_at, truncated toward zero."""
    return int((_as_utc(expires_at) - now).total_seconds() / 60)


class AuthService:
    """Session lifecycle: issue, validate, slide, revoke.

    Expiry is checked lazily on read; stale rows are never swept.
    """

    def __init__(
        self,
        sessions: ISessionStore,
        users: ICredentialSource | None = None,
        hasher: IPasswordVerifier | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.sessions = sessions
        self.users = users
        self.hasher = hasher
        self.clock = clock

    def create_session(self, user_id: str, ttl_hours: int = 24) -> str:
        token = generate_session_token()
        expires_at = self.clock() + timedelta(hours=ttl_hours)
        self.sessions.create(user_id, token, expires_at)
        sessions_created_total.inc()
        logger.info("session_created", user_id=user_id, expires_at=expires_at.isoformat())
        return token

    def validate_session(self, token: str) -> UserIdentity | None:
        session = self.sessions.find_by_token(token)
        if session is None:
            return None
        if _as_utc(session.expires_at) <= self.clock():
            return None
        return session.user

    def extend_session(self, token: str, extra_hours: int = 1) -> str:
        new_expiry = self.clock() + timedelta(hours=extra_hours)
        if self.sessions.update_expiration(token, new_expiry):
            sessions_extended_total.inc()
        return token

    def extend_if_needed(self, token: str, threshold_minutes: int = 30, extra_hours: int = 1) -> str | None:
        session = self.sessions.find_by_token(token)
        if session is None:
            return None
        if minutes_until(session.expires_at, self.clock()) <= threshold_minutes:
            return self.extend_session(token, extra_hours)
        return token

    def delete_session(self, token: str) -> None:
        self.sessions.delete_by_token(token)

    def login(self, email: str, password: str, ttl_hours: int = 24) -> tuple[str, UserIdentity]:
        row = self.users.get_row_by_email(email)
        if not row or not self.hasher.verify(password, row.password_hash):
            logger.info("login_failed", email=email)
            raise InvalidCredentialsError()
        token = self.create_session(row.id, ttl_hours)
        return token, UserIdentity(id=row.id, name=row.name, email=row.email, role=row.role)
