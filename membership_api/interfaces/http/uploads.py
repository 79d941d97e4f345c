from fastapi import UploadFile

from ...config import settings
from ...domain.entities import UploadedFile
from ...domain.errors import ValidationError


def read_upload(upload: UploadFile | None) -> UploadedFile | None:
    if upload is None or not upload.filename:
        return None
    data = upload.file.read()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(f"File {upload.filename} is too large")
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


def read_uploads(uploads: list[UploadFile] | None) -> list[UploadedFile]:
    files = []
    for upload in uploads or []:
        f = read_upload(upload)
        if f is not None:
            files.append(f)
    return files
