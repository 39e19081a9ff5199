"""Profile and role router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile, require_admin
from ..models.profile import Profile as ProfileModel
from ..schemas.profile import (
    ChangeRoleRequest,
    GetProfileRequest,
    Profile,
    ProfileList,
    RoleResponse,
    SetLockRequest,
    UpdateProfileRequest,
    UserRole,
)
from ..services.profile_service import ProfileService
from .responses import ok

router = APIRouter(prefix="/v1/profile", tags=["profile"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)
ADMIN_DEPENDENCY = Depends(require_admin)


@router.post("/me", response_model=Profile)
async def get_my_profile(profile: ProfileModel = PROFILE_DEPENDENCY) -> JSONResponse:
    """The caller's profile, created from the token on first sight."""
    return ok(Profile.model_validate(profile))


@router.post("/update", response_model=Profile)
async def update_my_profile(
    request: UpdateProfileRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: ProfileModel = PROFILE_DEPENDENCY,
) -> JSONResponse:
    updated = await ProfileService(db).update_own_profile(profile.id, request)
    return ok(Profile.model_validate(updated))


@router.post("/role", response_model=RoleResponse)
async def get_my_role(profile: ProfileModel = PROFILE_DEPENDENCY) -> JSONResponse:
    role = UserRole(profile.role)
    return ok(RoleResponse(user_id=profile.id, role=role, is_admin=role == UserRole.ADMIN))


@router.post("/get", response_model=Profile)
async def get_profile(
    request: GetProfileRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: ProfileModel = ADMIN_DEPENDENCY,
) -> JSONResponse:
    profile = await ProfileService(db).get_profile_or_raise(request.user_id)
    return ok(Profile.model_validate(profile))


@router.post("/admin/list", response_model=ProfileList)
async def list_profiles(
    db: AsyncSession = DB_DEPENDENCY,
    admin: ProfileModel = ADMIN_DEPENDENCY,
) -> JSONResponse:
    profiles = await ProfileService(db).list_profiles()
    return ok(ProfileList(items=[Profile.model_validate(p) for p in profiles]))


@router.post("/admin/change-role", response_model=Profile)
async def change_role(
    request: ChangeRoleRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: ProfileModel = ADMIN_DEPENDENCY,
) -> JSONResponse:
    profile = await ProfileService(db).change_role(request.user_id, request.role, actor_id=admin.id)
    return ok(Profile.model_validate(profile))


@router.post("/admin/set-lock", response_model=Profile)
async def set_lock(
    request: SetLockRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: ProfileModel = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Lock or unlock an account; locked users are refused on every authenticated call."""
    profile = await ProfileService(db).set_locked(request.user_id, request.locked, actor_id=admin.id)
    return ok(Profile.model_validate(profile))
