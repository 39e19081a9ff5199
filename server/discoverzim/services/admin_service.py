"""Back-office aggregates and the API documentation registry."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.accommodation import Accommodation
from ..models.audit import ApiDoc, AuditAction
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.destination import Destination
from ..models.event import Event
from ..models.payment import Payment
from ..models.profile import Profile
from ..schemas.admin import SendEmailRequest, UpsertApiDocRequest
from .audit_service import AuditService
from .mailer import EmailTemplate, MailDispatcher, mail_dispatcher

logger = logging.getLogger(__name__)


class AdminService:
    """Service for admin dashboard and registry operations."""

    def __init__(self, db: AsyncSession, dispatcher: Optional[MailDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or mail_dispatcher
        self.audit = AuditService(db)

    async def _count(self, model) -> int:
        return int((await self.db.execute(select(func.count()).select_from(model))).scalar_one())

    async def dashboard_stats(self) -> dict:
        """Headline counts and revenue from completed payments."""
        by_status = {status.value: 0 for status in BookingStatus}
        rows = await self.db.execute(select(Booking.status, func.count(Booking.id)).group_by(Booking.status))
        for status, count in rows.all():
            by_status[str(status)] = int(count)

        revenue = (
            await self.db.execute(
                select(func.coalesce(func.sum(Payment.amount), 0)).where(
                    Payment.status == PaymentStatus.COMPLETED.value
                )
            )
        ).scalar_one()

        return {
            "user_count": await self._count(Profile),
            "booking_count": sum(by_status.values()),
            "bookings_by_status": by_status,
            "revenue": round(float(revenue or 0), 2),
            "destination_count": await self._count(Destination),
            "event_count": await self._count(Event),
            "accommodation_count": await self._count(Accommodation),
        }

    async def list_api_docs(self) -> list[ApiDoc]:
        stmt = select(ApiDoc).order_by(ApiDoc.endpoint_path, ApiDoc.method)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def upsert_api_doc(self, request: UpsertApiDocRequest, actor_id: str) -> ApiDoc:
        """Insert or replace the row for (endpoint_path, method)."""
        method = request.method.upper()
        stmt = select(ApiDoc).where(ApiDoc.endpoint_path == request.endpoint_path, ApiDoc.method == method)
        doc = (await self.db.execute(stmt)).scalar_one_or_none()

        values = request.model_dump()
        values["method"] = method
        action = AuditAction.UPDATE if doc else AuditAction.CREATE
        if doc is None:
            doc = ApiDoc(**values)
            self.db.add(doc)
        else:
            for name, value in values.items():
                setattr(doc, name, value)
        await self.db.flush()

        self.audit.record(action, "api_docs", doc.id, actor_id, values)
        await self.db.commit()
        await self.db.refresh(doc)

        logger.info(
            "API doc saved",
            extra={"endpoint_path": doc.endpoint_path, "method": doc.method, "actor_id": actor_id}
        )
        return doc

    async def send_custom_email(self, request: SendEmailRequest, actor_id: str) -> tuple[UUID, bool]:
        """
        Queue a free-form email and audit it.

        Returns the audit record id and whether delivery was queued.
        """
        email_id = uuid4()
        self.audit.record(
            AuditAction.CREATE,
            "emails",
            email_id,
            actor_id,
            {"recipient": str(request.recipient), "subject": request.subject},
        )
        await self.db.commit()

        task = self.dispatcher.dispatch(
            EmailTemplate.CUSTOM,
            str(request.recipient),
            custom={"subject": request.subject, "html": request.html, "text": request.text},
        )

        logger.info(
            "Custom email queued",
            extra={"email_id": str(email_id), "subject": request.subject, "actor_id": actor_id}
        )
        return email_id, task is not None
