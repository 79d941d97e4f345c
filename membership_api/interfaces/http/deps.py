from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...application.media import MediaAttachmentManager, MediaBucket
from ...application.use_cases.activity_programs import ActivityProgramService
from ...application.use_cases.members import MemberService
from ...application.use_cases.news import NewsService
from ...application.use_cases.organization import OrganizationService
from ...application.use_cases.profile import ProfileService
from ...application.use_cases.register_user import RegisterUser
from ...config import settings
from ...infrastructure.db import get_db
from ...infrastructure.models import MediaActivity, MediaNews
from ...infrastructure.repositories import UserRepository
from ...infrastructure.security import PasswordHasher
from ...infrastructure.storage import BlobStorage


def get_storage(request: Request) -> BlobStorage:
    return request.app.state.storage


def get_register_user(db: Session = Depends(get_db)) -> RegisterUser:
    return RegisterUser(repo=UserRepository(db), hasher=PasswordHasher())


def get_activity_service(db: Session = Depends(get_db), storage: BlobStorage = Depends(get_storage)) -> ActivityProgramService:
    media = MediaAttachmentManager(
        db, storage, settings.BUCKET_ACTIVITY_MEDIA, MediaActivity, "activity_program_id",
        max_workers=settings.UPLOAD_CONCURRENCY,
    )
    return ActivityProgramService(db, media)


def get_news_service(db: Session = Depends(get_db), storage: BlobStorage = Depends(get_storage)) -> NewsService:
    media = MediaAttachmentManager(
        db, storage, settings.BUCKET_NEWS_MEDIA, MediaNews, "news_id",
        max_workers=settings.UPLOAD_CONCURRENCY,
    )
    return NewsService(db, media)


def get_organization_service(db: Session = Depends(get_db), storage: BlobStorage = Depends(get_storage)) -> OrganizationService:
    return OrganizationService(db, MediaBucket(storage, settings.BUCKET_ORGANIZATION_IMAGES))


def get_profile_service(db: Session = Depends(get_db), storage: BlobStorage = Depends(get_storage)) -> ProfileService:
    return ProfileService(
        db,
        avatars=MediaBucket(storage, settings.BUCKET_AVATARS),
        credentials=MediaBucket(storage, settings.BUCKET_CREDENTIALS),
    )


def get_member_service(
    db: Session = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
    register: RegisterUser = Depends(get_register_user),
) -> MemberService:
    return MemberService(
        db,
        register,
        avatars=MediaBucket(storage, settings.BUCKET_AVATARS),
        credentials=MediaBucket(storage, settings.BUCKET_CREDENTIALS),
        activity_media=MediaBucket(storage, settings.BUCKET_ACTIVITY_MEDIA),
        news_media=MediaBucket(storage, settings.BUCKET_NEWS_MEDIA),
    )
