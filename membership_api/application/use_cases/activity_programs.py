from datetime import datetime, timezone

import structlog
from sqlalchemy.orm import Session, selectinload

from ...domain.entities import ActivityStatus, UploadedFile, UserIdentity
from ...domain.errors import InvalidStateError, NotFoundError, ValidationError
from ...infrastructure.models import ActivityProgram
from ..dto import MediaUpdateResult, Page, paginate, parse_enum, require_owner
from ..media import MediaAttachmentManager, MediaDeletion

logger = structlog.get_logger()

NOT_CANCELED = "Activity is not in Canceled status"


class ActivityProgramService:
    """Member-owned activity programs.

    An activity is frozen unless an admin has moved it to CANCELED: text
    edits, media edits and deletion all require that status.
    """

    def __init__(self, db: Session, media: MediaAttachmentManager):
        self.db = db
        self.media = media

    def _get(self, activity_id: str) -> ActivityProgram:
        row = self.db.get(ActivityProgram, activity_id)
        if row is None:
            raise NotFoundError("Activity not found")
        return row

    def _get_owned(self, activity_id: str, user: UserIdentity, message: str = "Forbidden") -> ActivityProgram:
        row = self._get(activity_id)
        require_owner(row, user.id, message)
        return row

    @staticmethod
    def _require_canceled(row: ActivityProgram, message: str = NOT_CANCELED) -> None:
        if row.status != ActivityStatus.CANCELED:
            raise InvalidStateError(message)

    def list_for_owner(self, user: UserIdentity) -> list[ActivityProgram]:
        return (
            self.db.query(ActivityProgram)
            .options(selectinload(ActivityProgram.media))
            .filter(ActivityProgram.user_id == user.id)
            .order_by(ActivityProgram.created_at.desc())
            .all()
        )

    def get_for_owner(self, activity_id: str, user: UserIdentity) -> ActivityProgram:
        return self._get_owned(activity_id, user)

    def create(self, user: UserIdentity, title: str, description: str) -> ActivityProgram:
        row = ActivityProgram(
            title=title,
            description=description,
            user_id=user.id,
            time=datetime.now(timezone.utc),
        )
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        logger.info("activity_created", activity_id=row.id, user_id=user.id)
        return row

    def add_media(self, activity_id: str, user: UserIdentity, files: list[UploadedFile]) -> int:
        row = self._get_owned(
            activity_id, user, "Forbidden: You do not have permission to add media to this activity."
        )
        if not files:
            raise ValidationError("No media files uploaded")
        return len(self.media.attach_or_fail(row.id, files))

    def update_text(self, activity_id: str, user: UserIdentity, title: str, description: str) -> ActivityProgram:
        row = self._get_owned(activity_id, user)
        self._require_canceled(row)
        row.title = title
        row.description = description
        self.db.commit(); self.db.refresh(row)
        return row

    def update_media(
        self,
        activity_id: str,
        user: UserIdentity,
        media_ids_to_delete: list[str],
        files: list[UploadedFile],
    ) -> MediaUpdateResult:
        row = self._get_owned(activity_id, user)
        self._require_canceled(row)
        result = MediaUpdateResult()
        result.deleted_media_count = self.media.detach(row.id, media_ids_to_delete)
        added = self.media.attach(row.id, files)
        result.added_media_count = len(added)
        result.added_ids = [m.id for m in added]
        return result

    def delete(self, activity_id: str, user: UserIdentity) -> list[MediaDeletion]:
        row = self._get_owned(activity_id, user)
        self._require_canceled(row, "Only canceled activities can be deleted")
        # children first: a crash here leaves orphaned blobs, never a parent pointing at missing media
        results = self.media.purge(row.id)
        self.db.delete(row); self.db.commit()
        logger.info("activity_deleted", activity_id=activity_id, media=len(results),
                    blob_failures=sum(1 for r in results if not r.success))
        return results

    # --- admin

    def list_all(self, page: int, limit: int) -> Page:
        query = (
            self.db.query(ActivityProgram)
            .options(selectinload(ActivityProgram.user))
            .order_by(ActivityProgram.created_at.desc())
        )
        return paginate(query, page, limit)

    def update_status(self, activity_id: str, status: str) -> ActivityProgram:
        new_status = parse_enum(ActivityStatus, status, "Status is not Match")
        row = self.db.get(ActivityProgram, activity_id)
        if row is None:
            raise NotFoundError("Activity Program not found")
        row.status = new_status
        self.db.commit(); self.db.refresh(row)
        logger.info("activity_status_changed", activity_id=activity_id, status=new_status.value)
        return row
