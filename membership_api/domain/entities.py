from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class ActivityStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class ProgramType(str, Enum):
    MARKETING = "MARKETING"
    OPERASIONAL = "OPERASIONAL"
    KEUANGAN = "KEUANGAN"


class OrganizationPosition(str, Enum):
    CHAIRMAN = "CHAIRMAN"
    VICE_CHAIRMAN = "VICE_CHAIRMAN"
    SECRETARY = "SECRETARY"
    TREASURER = "TREASURER"
    MARKETING_COORDINATOR = "MARKETING_COORDINATOR"
    OPERATIONAL_COORDINATOR = "OPERATIONAL_COORDINATOR"
    FINANCE_COORDINATOR = "FINANCE_COORDINATOR"


@dataclass(frozen=True)
class User:
    id: str | None
    name: str
    email: str
    role: Role = Role.MEMBER


@dataclass(frozen=True)
class UserIdentity:
    """What a valid session resolves to. Never carries the password hash."""
    id: str
    name: str
    email: str
    role: Role


@dataclass(frozen=True)
class SessionRecord:
    token: str
    user_id: str
    expires_at: datetime
    user: UserIdentity | None = None


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()
