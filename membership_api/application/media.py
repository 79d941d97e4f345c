from __future__ import annotations

import secrets
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import PurePosixPath

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain.entities import UploadedFile
from ..domain.errors import DependencyFailure, MediaUploadError
from ..infrastructure.metrics import blob_deletes_total, media_uploads_total
from ..infrastructure.storage import BlobStorage, StorageError, storage_key_from_url

logger = structlog.get_logger()


@dataclass(frozen=True)
class MediaDeletion:
    media_id: str
    success: bool


def make_storage_key(filename: str) -> str:
    """Millisecond prefix plus a random tag, so same-named files in one batch never collide."""
    name = PurePosixPath(filename.replace("\\", "/")).name or "file"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{name}"


class MediaBucket:
    """One bucket of the blob store, addressed by public URL."""

    def __init__(self, storage: BlobStorage, bucket: str):
        self.storage = storage
        self.bucket = bucket

    def upload_key(self, file: UploadedFile) -> str:
        key = make_storage_key(file.filename)
        try:
            self.storage.upload(self.bucket, key, file.data, content_type=file.content_type)
        except StorageError:
            media_uploads_total.labels(bucket=self.bucket, outcome="failure").inc()
            raise
        media_uploads_total.labels(bucket=self.bucket, outcome="success").inc()
        return key

    def upload(self, file: UploadedFile) -> str:
        return self.storage.public_url(self.bucket, self.upload_key(file))

    def remove_keys(self, keys: list[str]) -> bool:
        if not keys:
            return True
        try:
            self.storage.remove(self.bucket, keys)
        except StorageError as e:
            blob_deletes_total.labels(bucket=self.bucket, outcome="failure").inc(len(keys))
            logger.error("blob_remove_failed", bucket=self.bucket, keys=keys, error=str(e))
            return False
        blob_deletes_total.labels(bucket=self.bucket, outcome="success").inc(len(keys))
        return True

    def remove_urls(self, urls: list[str]) -> bool:
        return self.remove_keys([storage_key_from_url(u) for u in urls if u])

    def upload_or_fail(self, file: UploadedFile, *, public: bool = True) -> str:
        """Upload and return the public URL (or the bare key for private buckets)."""
        try:
            return self.upload(file) if public else self.upload_key(file)
        except StorageError as e:
            logger.error("blob_upload_failed", bucket=self.bucket, filename=file.filename, error=str(e))
            raise DependencyFailure("Storage Error") from e

    def replace_single(self, old_url: str | None, file: UploadedFile) -> str:
        """Drop the previous blob (best effort), then upload the new one."""
        if old_url:
            self.remove_urls([old_url])
        return self.upload_or_fail(file)


class MediaAttachmentManager(MediaBucket):
    """Attach and detach blob-backed media rows for one parent resource type.

    ``model`` is the media ORM class and ``parent_field`` the name of its
    foreign-key column (``activity_program_id``, ``news_id``).
    """

    def __init__(
        self,
        db: Session,
        storage: BlobStorage,
        bucket: str,
        model,
        parent_field: str,
        max_workers: int = 4,
    ):
        super().__init__(storage, bucket)
        self.db = db
        self.model = model
        self.parent_field = parent_field
        self.max_workers = max_workers

    @property
    def _parent_column(self):
        return getattr(self.model, self.parent_field)

    def _try_upload(self, file: UploadedFile) -> str | None:
        try:
            return self.upload(file)
        except StorageError as e:
            logger.warning("media_upload_failed", bucket=self.bucket, filename=file.filename, error=str(e))
            return None

    def attach(self, parent_id: str, files: list[UploadedFile]) -> list:
        """Upload every file concurrently and persist a row for each success.

        A failed upload is skipped; ``order`` is the file's index in the
        submitted batch, so gaps are possible.
        """
        if not files:
            return []
        workers = max(1, min(self.max_workers, len(files)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            urls = list(pool.map(self._try_upload, files))

        rows = []
        for index, (file, url) in enumerate(zip(files, urls)):
            if url is None:
                continue
            rows.append(self.model(
                media_url=url,
                type=file.content_type,
                format=file.extension,
                size=file.size,
                order=index,
                **{self.parent_field: parent_id},
            ))
        if not rows:
            return []

        self.db.add_all(rows)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self.remove_urls([r.media_url for r in rows])
            logger.error("media_rows_persist_failed", bucket=self.bucket, parent_id=parent_id, error=str(e))
            raise DependencyFailure() from e

        logger.info("media_attached", bucket=self.bucket, parent_id=parent_id,
                    added=len(rows), failed=len(files) - len(rows))
        return rows

    def attach_or_fail(self, parent_id: str, files: list[UploadedFile]) -> list:
        rows = self.attach(parent_id, files)
        if not rows:
            raise MediaUploadError()
        return rows

    def detach(self, parent_id: str, media_ids: list[str]) -> int:
        """Delete the given media of this parent. Ids of other parents or unknown ids are ignored."""
        if not media_ids:
            return 0
        rows = (
            self.db.query(self.model)
            .filter(self.model.id.in_(media_ids), self._parent_column == parent_id)
            .all()
        )
        if not rows:
            return 0
        # blob failures leave orphans behind; rows go regardless
        self.remove_urls([r.media_url for r in rows])
        for row in rows:
            self.db.delete(row)
        self.db.commit()
        logger.info("media_detached", bucket=self.bucket, parent_id=parent_id, deleted=len(rows))
        return len(rows)

    def purge(self, parent_id: str) -> list[MediaDeletion]:
        rows = self.db.query(self.model).filter(self._parent_column == parent_id).all()
        results = []
        for row in rows:
            ok = self.remove_urls([row.media_url])
            results.append(MediaDeletion(media_id=row.id, success=ok))
            self.db.delete(row)
        if rows:
            self.db.commit()
        return results
