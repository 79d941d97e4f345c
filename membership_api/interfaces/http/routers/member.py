from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ....application.media import MediaDeletion
from ....application.use_cases.activity_programs import ActivityProgramService
from ....domain.entities import UserIdentity
from ..authz import require_member
from ..deps import get_activity_service
from ..schemas import ActivityOut, ActivityTextReq
from ..uploads import read_uploads

router = APIRouter(prefix="/member", tags=["member"])


def media_results(results: list[MediaDeletion]) -> list[dict]:
    return [{"mediaId": r.media_id, "success": r.success} for r in results]


@router.get("/activity-program")
def list_activity_programs(
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    rows = svc.list_for_owner(user)
    return {
        "message": "Activity programs retrieved successfully",
        "data": [ActivityOut.model_validate(r).dump() for r in rows],
    }


@router.get("/activity-program/{activity_id}")
def get_activity_program(
    activity_id: str,
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    row = svc.get_for_owner(activity_id, user)
    return {"message": "Activity program found", "data": ActivityOut.model_validate(row).dump()}


@router.post("/activity-program", status_code=status.HTTP_201_CREATED)
def create_activity_program(
    payload: ActivityTextReq,
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    row = svc.create(user, payload.title, payload.description)
    return {"message": "Activity program created successfully", "data": ActivityOut.model_validate(row).dump()}


@router.put("/activity-program/{activity_id}")
def update_activity_program(
    activity_id: str,
    payload: ActivityTextReq,
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    row = svc.update_text(activity_id, user, payload.title, payload.description)
    return {"message": "Activity program updated successfully", "data": ActivityOut.model_validate(row).dump()}


@router.delete("/activity-program/{activity_id}")
def delete_activity_program(
    activity_id: str,
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    results = svc.delete(activity_id, user)
    return {"message": "Activity program deleted successfully", "mediaResults": media_results(results)}


@router.post("/activity-media/{activity_id}", status_code=status.HTTP_201_CREATED)
def add_activity_media(
    activity_id: str,
    files: list[UploadFile] | None = File(None),
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    count = svc.add_media(activity_id, user, read_uploads(files))
    return {"message": "Media uploaded successfully", "count": count}


@router.put("/activity-media/{activity_id}")
def update_activity_media(
    activity_id: str,
    media_ids_to_delete: list[str] | None = Form(None, alias="mediaIdsToDelete"),
    files: list[UploadFile] | None = File(None),
    user: UserIdentity = Depends(require_member),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    result = svc.update_media(activity_id, user, media_ids_to_delete or [], read_uploads(files))
    return {
        "message": "Media updated successfully",
        "deletedMediaCount": result.deleted_media_count,
        "addedMediaCount": result.added_media_count,
        "addedMediaIds": result.added_ids,
    }
