from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings, settings as default_settings

logger = structlog.get_logger()


class StorageError(RuntimeError):
    pass


def public_url_for(base_url: str, bucket: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{bucket}/{quote(key, safe='')}"


def storage_key_from_url(url: str) -> str:
    """Blob key of a stored object: the URL-decoded trailing path segment."""
    return unquote(url.rstrip("/").rsplit("/", 1)[-1])


class BlobStorage:
    def upload(self, bucket: str, key: str, data: bytes, *, content_type: str | None = None) -> None:
        raise NotImplementedError

    def public_url(self, bucket: str, key: str) -> str:
        raise NotImplementedError

    def remove(self, bucket: str, keys: list[str]) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalBlobStorage(BlobStorage):
    root: Path
    public_base_url: str

    def _path(self, bucket: str, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/").replace("/", "_")
        return self.root / bucket / safe_key

    def upload(self, bucket: str, key: str, data: bytes, *, content_type: str | None = None) -> None:
        p = self._path(bucket, key)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            raise StorageError(f"local upload failed for {bucket}/{key}") from e

    def public_url(self, bucket: str, key: str) -> str:
        return public_url_for(self.public_base_url, bucket, key)

    def remove(self, bucket: str, keys: list[str]) -> None:
        failed = []
        for key in keys:
            try:
                self._path(bucket, key).unlink(missing_ok=True)
            except OSError:
                failed.append(key)
        if failed:
            raise StorageError(f"failed to remove {len(failed)} object(s) from {bucket}: {failed}")


@dataclass(frozen=True)
class S3BlobStorage(BlobStorage):
    endpoint_url: str
    region: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str
    client: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        # built once up front; upload threads share it
        if self.client is None:
            object.__setattr__(self, "client", boto3.client(
                "s3",
                endpoint_url=self.endpoint_url or None,
                region_name=self.region or None,
                aws_access_key_id=self.access_key_id or None,
                aws_secret_access_key=self.secret_access_key or None,
            ))

    def upload(self, bucket: str, key: str, data: bytes, *, content_type: str | None = None) -> None:
        extra: dict[str, object] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"s3 upload failed for {bucket}/{key}") from e

    def public_url(self, bucket: str, key: str) -> str:
        return public_url_for(self.public_base_url, bucket, key)

    def remove(self, bucket: str, keys: list[str]) -> None:
        if not keys:
            return
        try:
            resp = self.client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"s3 batch delete failed for {bucket}") from e
        errors = resp.get("Errors") or []
        if errors:
            raise StorageError(f"s3 could not delete {[err.get('Key') for err in errors]} from {bucket}")


def storage_from_settings(s: Settings = default_settings) -> BlobStorage:
    backend = (s.STORAGE_BACKEND or "local").strip().lower()
    if backend == "s3":
        missing = [
            name for name in ("S3_ENDPOINT_URL", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
            if not getattr(s, name)
        ]
        if missing:
            logger.error("storage_config_error", missing=missing)
        return S3BlobStorage(
            endpoint_url=s.S3_ENDPOINT_URL.strip(),
            region=s.S3_REGION.strip(),
            access_key_id=s.S3_ACCESS_KEY_ID.strip(),
            secret_access_key=s.S3_SECRET_ACCESS_KEY.strip(),
            public_base_url=s.STORAGE_PUBLIC_BASE_URL,
        )
    return LocalBlobStorage(root=Path(s.STORAGE_LOCAL_ROOT), public_base_url=s.STORAGE_PUBLIC_BASE_URL)
