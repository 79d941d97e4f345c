from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from ...application.auth_service import AuthService
from ...config import settings
from ...domain.entities import Role, UserIdentity
from ...domain.errors import AuthenticationError, AuthorizationError
from ...infrastructure.db import get_db
from ...infrastructure.repositories import SessionRepository, UserRepository
from ...infrastructure.security import PasswordHasher


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(SessionRepository(db), UserRepository(db), PasswordHasher())


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=True,
        samesite="lax" if settings.is_production else "none",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=True,
        samesite="lax" if settings.is_production else "none",
    )


def role_allowed(role: Role, allowed: frozenset[Role]) -> bool:
    match role:
        case Role.ADMIN:
            return Role.ADMIN in allowed
        case Role.MEMBER:
            return Role.MEMBER in allowed
        case _:
            return False


def authorize(*roles: Role):
    """Route gate: valid session cookie plus one of ``roles``.

    Missing, unknown and expired tokens all answer 401 with the same body.
    Sessions close to expiry are slid forward for every role.
    """
    allowed = frozenset(roles)

    def dependency(request: Request, auth: AuthService = Depends(get_auth_service)) -> UserIdentity:
        token = get_session_token(request)
        if not token:
            raise AuthenticationError()
        user = auth.validate_session(token)
        if user is None:
            raise AuthenticationError()
        if not role_allowed(user.role, allowed):
            raise AuthorizationError()
        auth.extend_if_needed(
            token,
            threshold_minutes=settings.SESSION_EXTEND_THRESHOLD_MINUTES,
            extra_hours=settings.SESSION_EXTEND_HOURS,
        )
        return user

    return dependency


require_admin = authorize(Role.ADMIN)
require_member = authorize(Role.MEMBER)
require_user = authorize(Role.ADMIN, Role.MEMBER)
