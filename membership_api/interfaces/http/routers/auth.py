from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from ....application.auth_service import AuthService
from ....application.use_cases.profile import ProfileService
from ....application.use_cases.register_user import RegisterUser
from ....config import settings
from ....domain.entities import Role, UserIdentity
from ..authz import (
    clear_session_cookie,
    get_auth_service,
    get_session_token,
    require_user,
    set_session_cookie,
)
from ..deps import get_profile_service, get_register_user
from ..rate_limit import limiter
from ..schemas import LoginReq, ProfileResp, RegisterReq, UserResp
from ..uploads import read_upload

router = APIRouter(prefix="/auth", tags=["auth"])


def _profile(row) -> dict:
    data = ProfileResp.model_validate(row).model_copy(update={"has_id_card_photo": bool(row.id_card_photo)})
    return data.dump()


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
def register(
    request: Request,
    response: Response,
    payload: RegisterReq,
    uc: RegisterUser = Depends(get_register_user),
    auth: AuthService = Depends(get_auth_service),
):
    user = uc.execute(
        payload.name,
        payload.email,
        payload.password,
        role=payload.role or Role.MEMBER,
        address=payload.address,
        program_type=payload.program_type,
    )
    token = auth.create_session(user.id, settings.SESSION_TTL_HOURS)
    set_session_cookie(response, token)
    return {"message": "User created successfully", "data": UserResp.model_validate(user).dump()}


@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    payload: LoginReq,
    auth: AuthService = Depends(get_auth_service),
):
    token, user = auth.login(payload.email, payload.password, settings.SESSION_TTL_HOURS)
    set_session_cookie(response, token)
    return {"message": "Login successful", "data": UserResp.model_validate(user).dump()}


@router.delete("/logout")
def logout(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    token = get_session_token(request)
    if token:
        auth.delete_session(token)
    clear_session_cookie(response)
    return {"message": "Logout successful"}


@router.get("/me")
def me(
    user: UserIdentity = Depends(require_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return {"message": "User found", "data": _profile(profiles.get_profile(user))}


@router.put("/edit-avatar/{user_id}")
def edit_avatar(
    user_id: str,
    avatar: UploadFile | None = File(None),
    user: UserIdentity = Depends(require_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    row = profiles.edit_avatar(user_id, user, read_upload(avatar))
    return {"message": "Avatar updated successfully", "data": _profile(row)}


@router.put("/edit-id-card-photo/{user_id}")
def edit_id_card_photo(
    user_id: str,
    id_card_photo: UploadFile | None = File(None, alias="idCardPhoto"),
    user: UserIdentity = Depends(require_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    row = profiles.edit_id_card_photo(user_id, user, read_upload(id_card_photo))
    return {"message": "ID card photo updated successfully", "data": _profile(row)}
