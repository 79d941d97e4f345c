import structlog
from sqlalchemy.orm import Session

from ...domain.entities import UploadedFile, UserIdentity
from ...domain.errors import AuthorizationError, NotFoundError, ValidationError
from ...infrastructure.models import UserORM
from ..media import MediaBucket

logger = structlog.get_logger()


class ProfileService:
    """Self-service profile images. Avatars are public; id-card photos live in a
    private bucket, so only their storage key is kept."""

    def __init__(self, db: Session, avatars: MediaBucket, credentials: MediaBucket):
        self.db = db
        self.avatars = avatars
        self.credentials = credentials

    def get_profile(self, user: UserIdentity) -> UserORM:
        row = self.db.get(UserORM, user.id)
        if row is None:
            raise NotFoundError("User not found")
        return row

    def _own_row(self, user_id: str, user: UserIdentity) -> UserORM:
        if user_id != user.id:
            raise AuthorizationError()
        return self.get_profile(user)

    def edit_avatar(self, user_id: str, user: UserIdentity, file: UploadedFile | None) -> UserORM:
        if file is None:
            raise ValidationError("Avatar is required")
        row = self._own_row(user_id, user)
        row.image_profile = self.avatars.replace_single(row.image_profile, file)
        self.db.commit(); self.db.refresh(row)
        logger.info("avatar_updated", user_id=user_id)
        return row

    def edit_id_card_photo(self, user_id: str, user: UserIdentity, file: UploadedFile | None) -> UserORM:
        if file is None:
            raise ValidationError("ID card photo is required")
        row = self._own_row(user_id, user)
        if row.id_card_photo:
            self.credentials.remove_keys([row.id_card_photo])
        row.id_card_photo = self.credentials.upload_or_fail(file, public=False)
        self.db.commit(); self.db.refresh(row)
        logger.info("id_card_photo_updated", user_id=user_id)
        return row
