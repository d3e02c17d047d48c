from fastapi import APIRouter, Depends, status

from citizen_portal.api.deps import get_audit_service, get_current_identity
from citizen_portal.core.authz import Identity
from citizen_portal.core.errors import failure_message
from citizen_portal.db.mongo import get_db
from citizen_portal.schemas.complaint import (
    ComplaintOut,
    CreateComplaintBody,
    StatusUpdateBody,
    UpdateComplaintBody,
)
from citizen_portal.services import complaints_service
from citizen_portal.services.audit_service import AuditService

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])


# =========================
# Public reads
# =========================
@router.get("", response_model=list[ComplaintOut])
async def list_complaints(db=Depends(get_db)):
    with failure_message("Failed to fetch complaints"):
        return await complaints_service.list_complaints(db)


@router.get("/category/{category}", response_model=list[ComplaintOut])
async def list_by_category(category: str, db=Depends(get_db)):
    with failure_message("Failed to fetch complaints by category"):
        return await complaints_service.list_complaints(db, category=category)


@router.get("/{complaint_id}", response_model=ComplaintOut)
async def get_complaint(complaint_id: str, db=Depends(get_db)):
    with failure_message("Failed to fetch complaint"):
        return await complaints_service.get_complaint(db, complaint_id)


# =========================
# Create (authenticated)
# =========================
@router.post("", response_model=ComplaintOut, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    body: CreateComplaintBody,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to create complaint"):
        out = await complaints_service.create_complaint(db, identity, body)
        await audit.record(
            "complaint.create", identity, "complaint", out["id"],
            f"Complaint created: {out['title']}",
            {"category": out["category"]},
        )
    return out


# =========================
# Update (owner only)
# =========================
@router.put("/{complaint_id}", response_model=ComplaintOut)
async def update_complaint(
    complaint_id: str,
    body: UpdateComplaintBody,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to update complaint"):
        before, out = await complaints_service.update_complaint(db, identity, complaint_id, body)

        changes = {}
        for field in complaints_service.CONTENT_FIELDS:
            if before.get(field) != out.get(field):
                changes[field] = {"from": before.get(field), "to": out.get(field)}

        if changes:
            await audit.record(
                "complaint.update", identity, "complaint", complaint_id,
                f"Complaint updated: {out['title']}",
                {"changes": changes},
            )
    return out


# =========================
# Delete (owner only)
# =========================
@router.delete("/{complaint_id}")
async def delete_complaint(
    complaint_id: str,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to delete complaint"):
        doc = await complaints_service.delete_complaint(db, identity, complaint_id)
        await audit.record(
            "complaint.delete", identity, "complaint", complaint_id,
            f"Complaint deleted: {doc.get('title')}",
            {"snapshot": {"category": doc.get("category"), "status": doc.get("status")}},
        )
    return {"message": "Complaint deleted successfully"}


# =========================
# Status
# =========================
@router.patch("/{complaint_id}/status", response_model=ComplaintOut)
async def update_status(
    complaint_id: str,
    body: StatusUpdateBody,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to update complaint status"):
        previous, out = await complaints_service.update_status(db, identity, complaint_id, body.status)
        await audit.record(
            "complaint.status", identity, "complaint", complaint_id,
            f"Complaint status changed to {out['status']}",
            {"from": previous, "to": out["status"]},
        )
    return out
