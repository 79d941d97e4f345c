from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, ForeignKey, Integer, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from ..domain.entities import (
    ActivityStatus,
    MemberStatus,
    OrganizationPosition,
    ProgramType,
    Role,
)


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(SAEnum(Role, native_enum=False), default=Role.MEMBER, nullable=False)
    status: Mapped[MemberStatus] = mapped_column(
        SAEnum(MemberStatus, native_enum=False), default=MemberStatus.ACTIVE, nullable=False
    )
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    program_type: Mapped[ProgramType | None] = mapped_column(SAEnum(ProgramType, native_enum=False), nullable=True)
    image_profile: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    id_card_photo: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    sessions: Mapped[list["SessionORM"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    activity_programs: Mapped[list["ActivityProgramORM"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    news: Mapped[list["NewsORM"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"UserORM(id={self.id!r}, email={self.email!r}, role={self.role!r})"


class SessionORM(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    user: Mapped["UserORM"] = relationship(back_populates="sessions")


class ActivityProgramORM(Base):
    __tablename__ = "activity_programs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    status: Mapped[ActivityStatus] = mapped_column(
        SAEnum(ActivityStatus, native_enum=False), default=ActivityStatus.ACTIVE, nullable=False
    )
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    user: Mapped["UserORM"] = relationship(back_populates="activity_programs")
    media: Mapped[list["MediaActivityORM"]] = relationship(
        back_populates="activity_program",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MediaActivityORM.order",
    )

    def __repr__(self) -> str:
        return f"ActivityProgramORM(id={self.id!r}, title={self.title!r}, status={self.status!r})"


class MediaActivityORM(Base):
    __tablename__ = "media_activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    media_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    format: Mapped[str] = mapped_column(String(32), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    activity_program_id: Mapped[str] = mapped_column(
        ForeignKey("activity_programs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    activity_program: Mapped["ActivityProgramORM"] = relationship(back_populates="media")


class NewsORM(Base):
    __tablename__ = "news"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    subtitle: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    program_type: Mapped[ProgramType] = mapped_column(SAEnum(ProgramType, native_enum=False), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    user: Mapped["UserORM"] = relationship(back_populates="news")
    media: Mapped[list["MediaNewsORM"]] = relationship(
        back_populates="news",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MediaNewsORM.order",
    )

    def __repr__(self) -> str:
        return f"NewsORM(id={self.id!r}, title={self.title!r})"


class MediaNewsORM(Base):
    __tablename__ = "media_news"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    media_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    format: Mapped[str] = mapped_column(String(32), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    news_id: Mapped[str] = mapped_column(ForeignKey("news.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    news: Mapped["NewsORM"] = relationship(back_populates="media")


class OrganizationStructureORM(Base):
    __tablename__ = "organization_structures"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[OrganizationPosition] = mapped_column(
        SAEnum(OrganizationPosition, native_enum=False), nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    media_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    def __repr__(self) -> str:
        return f"OrganizationStructureORM(id={self.id!r}, name={self.name!r}, position={self.position!r})"


User = UserORM
ActivityProgram = ActivityProgramORM
MediaActivity = MediaActivityORM
News = NewsORM
MediaNews = MediaNewsORM
OrganizationStructure = OrganizationStructureORM

__all__ = [
    "Base",
    "UserORM",
    "SessionORM",
    "ActivityProgramORM",
    "MediaActivityORM",
    "NewsORM",
    "MediaNewsORM",
    "OrganizationStructureORM",
    "User",
    "ActivityProgram",
    "MediaActivity",
    "News",
    "MediaNews",
    "OrganizationStructure",
]
