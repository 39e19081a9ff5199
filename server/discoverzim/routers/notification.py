"""Notification router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile
from ..models.profile import Profile
from ..schemas.common import CountResponse
from ..schemas.notification import MarkNotificationRequest, Notification, NotificationList
from ..services.notification_service import NotificationService
from .responses import ok

router = APIRouter(prefix="/v1/notification", tags=["notification"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)


async def _feed(service: NotificationService, user_id: str, unread_only: bool) -> NotificationList:
    items = await service.list_notifications(user_id, unread_only=unread_only)
    return NotificationList(
        items=[Notification.model_validate(n) for n in items],
        unread_count=await service.unread_count(user_id),
    )


@router.post("/mine", response_model=NotificationList)
async def list_notifications(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """The caller's notifications, newest first."""
    return ok(await _feed(NotificationService(db), profile.id, unread_only=False))


@router.post("/unread", response_model=NotificationList)
async def list_unread_notifications(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    return ok(await _feed(NotificationService(db), profile.id, unread_only=True))


@router.post("/mark-read", response_model=Notification)
async def mark_notification_read(
    request: MarkNotificationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    notification = await NotificationService(db).mark_read(profile.id, request.notification_id)
    return ok(Notification.model_validate(notification))


@router.post("/mark-all-read", response_model=CountResponse)
async def mark_all_notifications_read(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    count = await NotificationService(db).mark_all_read(profile.id)
    return ok(CountResponse(count=count))
