from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from ...domain.entities import (
    ActivityStatus,
    MemberStatus,
    OrganizationPosition,
    ProgramType,
    Role,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# --- requests

class RegisterReq(CamelModel):
    name: str = Field(min_length=3, pattern=r"^[A-Za-z\s]+$")
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role | None = None
    address: str | None = None
    program_type: ProgramType | None = None


class LoginReq(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class CreateMemberReq(CamelModel):
    name: str = Field(min_length=3, pattern=r"^[A-Za-z\s]+$")
    email: EmailStr
    password: str = Field(min_length=6)
    address: str | None = None
    program_type: str | None = None


class ActivityTextReq(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)


class StatusReq(BaseModel):
    status: str = Field(min_length=1)


class NewsReq(CamelModel):
    title: str = Field(min_length=1)
    subtitle: str = Field(min_length=1)
    description: str = Field(min_length=1)
    program_type: str


# --- responses

class UserResp(CamelModel):
    id: str
    name: str
    email: str
    role: Role


class ProfileResp(CamelModel):
    id: str
    name: str
    email: str
    role: Role
    status: MemberStatus
    address: str | None = None
    program_type: ProgramType | None = None
    image_profile: str | None = None
    has_id_card_photo: bool = False
    created_at: datetime


class MemberOut(CamelModel):
    id: str
    name: str
    email: str
    status: MemberStatus
    address: str | None = None
    program_type: ProgramType | None = None
    image_profile: str | None = None
    created_at: datetime


class MediaOut(CamelModel):
    id: str
    media_url: str
    type: str
    format: str
    size: int
    order: int


class OwnerOut(CamelModel):
    id: str
    name: str
    email: str


class ActivityOut(CamelModel):
    id: str
    title: str
    description: str
    time: datetime
    status: ActivityStatus
    user_id: str
    created_at: datetime
    media: list[MediaOut] = []


class ActivityAdminOut(CamelModel):
    id: str
    title: str
    description: str
    time: datetime
    status: ActivityStatus
    created_at: datetime
    user: OwnerOut


class NewsOut(CamelModel):
    id: str
    title: str
    subtitle: str
    description: str
    program_type: ProgramType
    created_at: datetime
    media: list[MediaOut] = []


class NewsDetailOut(NewsOut):
    updated_at: datetime
    user: OwnerOut


class OrganizationOut(CamelModel):
    id: str
    name: str
    media_url: str | None = None
    order: int
    position: OrganizationPosition
