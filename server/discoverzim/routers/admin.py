"""Admin back-office router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..models.audit import AuditAction
from ..models.profile import Profile
from ..schemas.admin import (
    ApiDoc,
    ApiDocList,
    AuditLog,
    AuditLogList,
    DashboardStats,
    EmailQueued,
    ListAuditLogsRequest,
    SendEmailRequest,
    UpsertApiDocRequest,
)
from ..services.admin_service import AdminService
from ..services.audit_service import AuditService
from .responses import ok

router = APIRouter(prefix="/v1/admin", tags=["admin"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


@router.post("/dashboard", response_model=DashboardStats)
async def dashboard(
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Headline counts and revenue."""
    stats = await AdminService(db).dashboard_stats()
    return ok(DashboardStats(**stats))


@router.post("/audit-logs", response_model=AuditLogList)
async def list_audit_logs(
    request: ListAuditLogsRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    action = AuditAction(request.action.value) if request.action else None
    entries = await AuditService(db).list_entries(request.table_name, action, request.limit)
    return ok(AuditLogList(items=[AuditLog.model_validate(e) for e in entries]))


@router.post("/api-docs/list", response_model=ApiDocList)
async def list_api_docs(
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    docs = await AdminService(db).list_api_docs()
    return ok(ApiDocList(items=[ApiDoc.model_validate(d) for d in docs]))


@router.post("/api-docs/upsert", response_model=ApiDoc)
async def upsert_api_doc(
    request: UpsertApiDocRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    doc = await AdminService(db).upsert_api_doc(request, actor_id=admin.id)
    return ok(ApiDoc.model_validate(doc))


@router.post("/send-email", response_model=EmailQueued)
async def send_email(
    request: SendEmailRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Send a custom subject/html/text email."""
    email_id, queued = await AdminService(db).send_custom_email(request, actor_id=admin.id)
    return ok(EmailQueued(email_id=email_id, recipient=str(request.recipient), subject=request.subject, queued=queued))
