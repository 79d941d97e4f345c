import structlog
from sqlalchemy.orm import Session, selectinload

from ...domain.entities import MemberStatus, ProgramType, Role, User
from ...domain.errors import NotFoundError
from ...infrastructure.models import ActivityProgram, News, UserORM
from ..dto import Page, paginate, parse_enum
from ..media import MediaBucket
from .register_user import RegisterUser

logger = structlog.get_logger()


class MemberService:
    """Admin view over MEMBER accounts."""

    def __init__(
        self,
        db: Session,
        register: RegisterUser,
        *,
        avatars: MediaBucket,
        credentials: MediaBucket,
        activity_media: MediaBucket,
        news_media: MediaBucket,
    ):
        self.db = db
        self.register = register
        self.avatars = avatars
        self.credentials = credentials
        self.activity_media = activity_media
        self.news_media = news_media

    def list_members(self, page: int, limit: int) -> Page:
        query = (
            self.db.query(UserORM)
            .filter(UserORM.role == Role.MEMBER)
            .order_by(UserORM.created_at.desc())
        )
        return paginate(query, page, limit)

    def update_status(self, user_id: str, status: str) -> UserORM:
        new_status = parse_enum(MemberStatus, status, "Status is not Match")
        row = self.db.get(UserORM, user_id)
        if row is None:
            raise NotFoundError("User not found")
        row.status = new_status
        self.db.commit(); self.db.refresh(row)
        logger.info("member_status_changed", user_id=user_id, status=new_status.value)
        return row

    def create_member(
        self,
        name: str,
        email: str,
        password: str,
        address: str | None = None,
        program_type: str | None = None,
    ) -> User:
        tag = parse_enum(ProgramType, program_type, "Invalid program type") if program_type else None
        return self.register.execute(
            name, email, password, role=Role.MEMBER, address=address, program_type=tag
        )

    def delete_member(self, user_id: str) -> None:
        row = (
            self.db.query(UserORM)
            .options(
                selectinload(UserORM.activity_programs).selectinload(ActivityProgram.media),
                selectinload(UserORM.news).selectinload(News.media),
            )
            .filter(UserORM.id == user_id)
            .first()
        )
        if row is None:
            raise NotFoundError("User not found")

        # blob removal is best effort; the account goes regardless
        if row.id_card_photo:
            self.credentials.remove_keys([row.id_card_photo])
        if row.image_profile:
            self.avatars.remove_urls([row.image_profile])
        self.activity_media.remove_urls([m.media_url for ap in row.activity_programs for m in ap.media])
        self.news_media.remove_urls([m.media_url for n in row.news for m in n.media])

        self.db.delete(row); self.db.commit()
        logger.info("member_deleted", user_id=user_id)
