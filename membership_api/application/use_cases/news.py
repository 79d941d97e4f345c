import structlog
from sqlalchemy.orm import Session, selectinload

from ...domain.entities import ProgramType, UploadedFile, UserIdentity
from ...domain.errors import NotFoundError, ValidationError
from ...infrastructure.models import News
from ..dto import MediaUpdateResult, Page, paginate, parse_enum, require_owner
from ..media import MediaAttachmentManager, MediaDeletion

logger = structlog.get_logger()


class NewsService:
    """Admin-authored news posts; only the authoring admin may change or remove one."""

    def __init__(self, db: Session, media: MediaAttachmentManager):
        self.db = db
        self.media = media

    def _get_owned(self, news_id: str, user: UserIdentity) -> News:
        row = self.db.get(News, news_id)
        if row is None:
            raise NotFoundError("News not found")
        require_owner(row, user.id)
        return row

    def list_all(self, page: int, limit: int) -> Page:
        query = (
            self.db.query(News)
            .options(selectinload(News.media))
            .order_by(News.created_at.desc())
        )
        return paginate(query, page, limit)

    def get(self, news_id: str) -> News:
        row = (
            self.db.query(News)
            .options(selectinload(News.media), selectinload(News.user))
            .filter(News.id == news_id)
            .first()
        )
        if row is None:
            raise NotFoundError("News not found")
        return row

    def create(self, user: UserIdentity, title: str, subtitle: str, description: str, program_type: str) -> News:
        tag = parse_enum(ProgramType, program_type, "Invalid program type")
        row = News(title=title, subtitle=subtitle, description=description, program_type=tag, user_id=user.id)
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        logger.info("news_created", news_id=row.id, user_id=user.id)
        return row

    def add_media(self, news_id: str, user: UserIdentity, files: list[UploadedFile]) -> int:
        row = self._get_owned(news_id, user)
        if not files:
            raise ValidationError("No media files uploaded")
        return len(self.media.attach_or_fail(row.id, files))

    def update(
        self,
        news_id: str,
        user: UserIdentity,
        title: str,
        subtitle: str,
        description: str,
        program_type: str,
    ) -> News:
        tag = parse_enum(ProgramType, program_type, "Invalid program type")
        row = self._get_owned(news_id, user)
        row.title = title
        row.subtitle = subtitle
        row.description = description
        row.program_type = tag
        self.db.commit(); self.db.refresh(row)
        return row

    def update_media(
        self,
        news_id: str,
        user: UserIdentity,
        media_ids_to_delete: list[str],
        files: list[UploadedFile],
    ) -> MediaUpdateResult:
        row = self._get_owned(news_id, user)
        result = MediaUpdateResult()
        result.deleted_media_count = self.media.detach(row.id, media_ids_to_delete)
        added = self.media.attach(row.id, files)
        result.added_media_count = len(added)
        result.added_ids = [m.id for m in added]
        return result

    def delete(self, news_id: str, user: UserIdentity) -> list[MediaDeletion]:
        row = self._get_owned(news_id, user)
        results = self.media.purge(row.id)
        self.db.delete(row); self.db.commit()
        logger.info("news_deleted", news_id=news_id, media=len(results))
        return results
