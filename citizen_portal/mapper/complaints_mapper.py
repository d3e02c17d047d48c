from citizen_portal.core.enums import ComplaintStatus, PortalComplaintStatus
from citizen_portal.mapper.citizens_mapper import to_citizen_summary
from citizen_portal.models.common import oid_str


def to_complaint_out(doc: dict, citizen: dict | None = None) -> dict:
    return {
        "id": oid_str(doc["_id"]),
        "title": doc.get("title") or "",
        "description": doc.get("description") or "",
        "category": doc.get("category") or "",
        "address": doc.get("address"),
        "status": doc.get("status") or ComplaintStatus.submitted.value,
        "citizen_id": oid_str(doc.get("citizen_id")),
        "citizen": to_citizen_summary(citizen),
        "attachment_id": doc.get("attachment_id"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


def to_category_out(doc: dict | None) -> dict | None:
    if not doc:
        return None
    return {
        "id": oid_str(doc["_id"]),
        "name": doc.get("name", ""),
        "description": doc.get("description", ""),
    }


def to_response_out(doc: dict) -> dict:
    return {
        "id": oid_str(doc["_id"]),
        "complaint_id": oid_str(doc.get("complaint_id")),
        "responder_name": doc.get("responder_name") or "Anonymous",
        "message": doc.get("message", ""),
        "is_official": bool(doc.get("is_official")),
        "attachment_id": doc.get("attachment_id"),
        "created_at": doc.get("created_at"),
    }


def to_portal_complaint_out(
    doc: dict,
    category: dict | None = None,
    responses: list | None = None,
    attachment_url: str | None = None,
) -> dict:
    return {
        "id": oid_str(doc["_id"]),
        "title": doc.get("title", ""),
        "description": doc.get("description", ""),
        "category_id": oid_str(doc.get("category_id")),
        "category": to_category_out(category),
        "location": doc.get("location", ""),
        "status": doc.get("status") or PortalComplaintStatus.pending.value,
        "submitter_id": oid_str(doc.get("submitter_id")),
        "attachment_id": doc.get("attachment_id"),
        "attachment_name": doc.get("attachment_name"),
        "attachment_url": attachment_url,
        "responses": [to_response_out(r) for r in (responses or [])],
        "created_at": doc.get("created_at"),
    }


def to_official_out(doc: dict, user: dict | None = None, category: dict | None = None) -> dict:
    return {
        "id": oid_str(doc["_id"]),
        "user_id": oid_str(doc.get("user_id")),
        "category_id": oid_str(doc.get("category_id")),
        "title": doc.get("title", ""),
        "email": (user or {}).get("email"),
        "category_name": (category or {}).get("name"),
    }
