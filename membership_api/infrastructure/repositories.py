from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .models import SessionORM, UserORM
from ..domain.entities import ProgramType, Role, SessionRecord, User, UserIdentity
from ..domain.errors import ConflictError
from ..application.use_cases.register_user import IUserRepository


def to_domain(u: UserORM) -> User:
    return User(id=u.id, name=u.name, email=u.email, role=u.role)


def to_identity(u: UserORM) -> UserIdentity:
    return UserIdentity(id=u.id, name=u.name, email=u.email, role=u.role)


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_email(self, email: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return to_domain(row) if row else None

    def get_row(self, user_id: str) -> UserORM | None:
        return self.db.get(UserORM, user_id)

    def get_row_by_email(self, email: str) -> UserORM | None:
        return self.db.query(UserORM).filter(UserORM.email == email).first()

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.MEMBER,
        address: str | None = None,
        program_type: ProgramType | None = None,
    ) -> User:
        row = UserORM(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            address=address,
            program_type=program_type,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            # two concurrent registrations can both pass the existence check
            self.db.rollback()
            raise ConflictError("Email already in use", code="EMAIL_IN_USE") from e
        self.db.refresh(row)
        return to_domain(row)


class SessionRepository:
    """Token -> (user, expiry) store. Every call is one single-row statement."""

    def __init__(self, db: Session): self.db = db

    def create(self, user_id: str, token: str, expires_at: datetime) -> SessionRecord:
        row = SessionORM(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(row); self.db.commit()
        return SessionRecord(token=row.token, user_id=row.user_id, expires_at=row.expires_at)

    def find_by_token(self, token: str) -> SessionRecord | None:
        row = self.db.execute(
            select(SessionORM).options(joinedload(SessionORM.user)).where(SessionORM.token == token)
        ).scalar_one_or_none()
        if row is None:
            return None
        return SessionRecord(
            token=row.token,
            user_id=row.user_id,
            expires_at=row.expires_at,
            user=to_identity(row.user),
        )

    def update_expiration(self, token: str, new_expiry: datetime) -> int:
        result = self.db.execute(
            update(SessionORM).where(SessionORM.token == token).values(expires_at=new_expiry)
        )
        self.db.commit()
        return result.rowcount

    def delete_by_token(self, token: str) -> int:
        result = self.db.execute(delete(SessionORM).where(SessionORM.token == token))
        self.db.commit()
        return result.rowcount
