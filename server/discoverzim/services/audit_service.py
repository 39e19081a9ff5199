"""Audit trail for administrative mutations."""

import logging
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.audit import AuditAction, AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """Service for writing and reading audit log rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def record(
        self,
        action: AuditAction,
        table_name: str,
        record_id: Any,
        user_id: Optional[str],
        new_data: Optional[dict] = None,
    ) -> AuditLog:
        """
        Stage an audit row in the caller's transaction.

        The row is committed (or rolled back) together with the mutation
        it describes.
        """
        entry = AuditLog(
            action=action.value,
            table_name=table_name,
            record_id=str(record_id),
            user_id=user_id,
            new_data=jsonable_encoder(new_data) if new_data is not None else None,
        )
        self.db.add(entry)

        logger.info(
            "Audit entry staged",
            extra={
                "action": action.value,
                "table_name": table_name,
                "record_id": str(record_id),
                "user_id": user_id,
            }
        )
        return entry

    async def list_entries(
        self,
        table_name: Optional[str] = None,
        action: Optional[AuditAction] = None,
        limit: int = 100,
    ) -> list[AuditLog]:
        """Newest audit rows first, optionally filtered."""
        stmt = select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
        if table_name:
            stmt = stmt.where(AuditLog.table_name == table_name)
        if action:
            stmt = stmt.where(AuditLog.action == action.value)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
