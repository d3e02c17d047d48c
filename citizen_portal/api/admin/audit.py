from fastapi import APIRouter, Depends, Query

from citizen_portal.api.deps import get_audit_service, get_current_identity
from citizen_portal.core import authz
from citizen_portal.core.authz import Identity
from citizen_portal.schemas.audit import AuditEventOut
from citizen_portal.services.audit_service import AuditService

router = APIRouter(prefix="/api/admin/audit", tags=["Audit"])


@router.get("", response_model=list[AuditEventOut])
async def list_audit_logs(
    limit: int = Query(default=200, ge=1, le=1000),
    identity: Identity = Depends(get_current_identity),
    audit: AuditService = Depends(get_audit_service),
):
    authz.enforce(authz.require_admin(identity))
    return await audit.list_logs(limit=limit)
