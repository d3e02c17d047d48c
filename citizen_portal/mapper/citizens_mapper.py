from citizen_portal.models.common import oid_str


def to_citizen_out(doc: dict) -> dict:
    """
    Public shape of a citizen document. The password hash never leaves
    this function.
    """
    return {
        "id": oid_str(doc["_id"]),
        "name": doc.get("name") or "",
        "email": doc.get("email") or "",
        "phone": doc.get("phone"),
        "address": doc.get("address"),
        "created_at": doc.get("created_at"),
    }


def to_citizen_summary(doc: dict | None) -> dict | None:
    if not doc:
        return None
    return {
        "id": oid_str(doc["_id"]),
        "name": doc.get("name") or "",
        "email": doc.get("email"),
        "phone": doc.get("phone"),
        "address": doc.get("address"),
    }
