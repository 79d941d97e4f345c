from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from ....application.use_cases.activity_programs import ActivityProgramService
from ....application.use_cases.members import MemberService
from ....application.use_cases.news import NewsService
from ....application.use_cases.organization import OrganizationService
from ....domain.entities import UserIdentity
from ..authz import require_admin
from ..deps import (
    get_activity_service,
    get_member_service,
    get_news_service,
    get_organization_service,
)
from ..schemas import (
    ActivityAdminOut,
    ActivityOut,
    CreateMemberReq,
    MemberOut,
    NewsDetailOut,
    NewsOut,
    NewsReq,
    OrganizationOut,
    StatusReq,
    UserResp,
)
from ..uploads import read_upload, read_uploads
from .member import media_results

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# --- members

@router.get("/members")
def list_members(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: MemberService = Depends(get_member_service),
):
    result = svc.list_members(page, limit)
    return {
        "message": "Members retrieved successfully",
        "data": [MemberOut.model_validate(r).dump() for r in result.items],
        "pagination": result.pagination(),
    }


@router.post("/members", status_code=status.HTTP_201_CREATED)
def create_member(payload: CreateMemberReq, svc: MemberService = Depends(get_member_service)):
    user = svc.create_member(
        payload.name, payload.email, payload.password,
        address=payload.address, program_type=payload.program_type,
    )
    return {"message": "Member created successfully", "data": UserResp.model_validate(user).dump()}


@router.patch("/members/{user_id}")
def update_member_status(user_id: str, payload: StatusReq, svc: MemberService = Depends(get_member_service)):
    row = svc.update_status(user_id, payload.status)
    return {"message": "Member status updated successfully", "data": MemberOut.model_validate(row).dump()}


@router.delete("/members/{user_id}")
def delete_member(user_id: str, svc: MemberService = Depends(get_member_service)):
    svc.delete_member(user_id)
    return {"message": "Member deleted successfully"}


# --- organization structure

@router.get("/organization-structure")
def list_organization_structure(svc: OrganizationService = Depends(get_organization_service)):
    rows = svc.list()
    return {
        "message": "Organization structures retrieved successfully",
        "data": [OrganizationOut.model_validate(r).dump() for r in rows],
    }


@router.post("/organization-structure", status_code=status.HTTP_201_CREATED)
def create_organization_structure(
    name: str | None = Form(None),
    order: int | None = Form(None),
    position: str | None = Form(None),
    image: UploadFile | None = File(None),
    svc: OrganizationService = Depends(get_organization_service),
):
    row = svc.create(name, order, position, read_upload(image))
    return {"message": "Organization structure created successfully", "data": OrganizationOut.model_validate(row).dump()}


@router.put("/organization-structure/{structure_id}")
def update_organization_structure(
    structure_id: str,
    name: str | None = Form(None),
    order: int | None = Form(None),
    position: str | None = Form(None),
    image: UploadFile | None = File(None),
    svc: OrganizationService = Depends(get_organization_service),
):
    row = svc.update(structure_id, name, order, position, read_upload(image))
    return {"message": "Organization structure updated successfully", "data": OrganizationOut.model_validate(row).dump()}


@router.delete("/organization-structure/{structure_id}")
def delete_organization_structure(structure_id: str, svc: OrganizationService = Depends(get_organization_service)):
    svc.delete(structure_id)
    return {"message": "Organization structure deleted successfully"}


# --- activity programs

@router.get("/activity-program")
def list_activity_programs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: ActivityProgramService = Depends(get_activity_service),
):
    result = svc.list_all(page, limit)
    return {
        "message": "Activity programs retrieved successfully",
        "data": [ActivityAdminOut.model_validate(r).dump() for r in result.items],
        "pagination": result.pagination(),
    }


@router.patch("/activity-program/{activity_id}")
def update_activity_status(
    activity_id: str,
    payload: StatusReq,
    svc: ActivityProgramService = Depends(get_activity_service),
):
    row = svc.update_status(activity_id, payload.status)
    return {"message": "Activity program status updated successfully", "data": ActivityOut.model_validate(row).dump()}


# --- news

@router.get("/news")
def list_news(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: NewsService = Depends(get_news_service),
):
    result = svc.list_all(page, limit)
    return {
        "message": "News retrieved successfully",
        "data": [NewsOut.model_validate(r).dump() for r in result.items],
        "pagination": result.pagination(),
    }


@router.get("/news/{news_id}")
def get_news(news_id: str, svc: NewsService = Depends(get_news_service)):
    row = svc.get(news_id)
    return {"message": "News found", "data": NewsDetailOut.model_validate(row).dump()}


@router.post("/news", status_code=status.HTTP_201_CREATED)
def create_news(
    payload: NewsReq,
    user: UserIdentity = Depends(require_admin),
    svc: NewsService = Depends(get_news_service),
):
    row = svc.create(user, payload.title, payload.subtitle, payload.description, payload.program_type)
    return {"message": "News created successfully", "data": NewsOut.model_validate(row).dump()}


@router.put("/news/{news_id}")
def update_news(
    news_id: str,
    payload: NewsReq,
    user: UserIdentity = Depends(require_admin),
    svc: NewsService = Depends(get_news_service),
):
    row = svc.update(news_id, user, payload.title, payload.subtitle, payload.description, payload.program_type)
    return {"message": "News updated successfully", "data": NewsOut.model_validate(row).dump()}


@router.delete("/news/{news_id}")
def delete_news(
    news_id: str,
    user: UserIdentity = Depends(require_admin),
    svc: NewsService = Depends(get_news_service),
):
    results = svc.delete(news_id, user)
    return {"message": "News deleted successfully", "mediaResults": media_results(results)}


@router.post("/news-media/{news_id}", status_code=status.HTTP_201_CREATED)
def add_news_media(
    news_id: str,
    files: list[UploadFile] | None = File(None),
    user: UserIdentity = Depends(require_admin),
    svc: NewsService = Depends(get_news_service),
):
    count = svc.add_media(news_id, user, read_uploads(files))
    return {"message": "Media uploaded successfully", "count": count}


@router.put("/news-media/{news_id}")
def update_news_media(
    news_id: str,
    media_ids_to_delete: list[str] | None = Form(None, alias="mediaIdsToDelete"),
    files: list[UploadFile] | None = File(None),
    user: UserIdentity = Depends(require_admin),
    svc: NewsService = Depends(get_news_service),
):
    result = svc.update_media(news_id, user, media_ids_to_delete or [], read_uploads(files))
    return {
        "message": "Media updated successfully",
        "deletedMediaCount": result.deleted_media_count,
        "addedMediaCount": result.added_media_count,
        "addedMediaIds": result.added_ids,
    }
