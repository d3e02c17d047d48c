from citizen_portal.core.authz import Identity, OfficialRef
from citizen_portal.db.mongo import ADMINS, CATEGORIES, OFFICIALS
from citizen_portal.models.common import oid_str
from citizen_portal.repositories.portal_repository import (
    AdminRepository,
    CategoryRepository,
    OfficialRepository,
)


async def resolve_identity(db, claims: dict) -> Identity:
    """
    Build the request Identity from validated token claims plus the
    role facts stored for that user (admin row, official row).
    """
    user_id = str(claims["id"])

    is_admin = await AdminRepository(db[ADMINS]).is_admin(user_id)

    official = None
    official_doc = await OfficialRepository(db[OFFICIALS]).get_by_user(user_id)
    if official_doc:
        category = await CategoryRepository(db[CATEGORIES]).get(official_doc.get("category_id"))
        official = OfficialRef(
            id=oid_str(official_doc["_id"]),
            category_id=oid_str(official_doc.get("category_id")),
            category_name=(category or {}).get("name"),
            title=official_doc.get("title", ""),
        )

    return Identity(
        id=user_id,
        name=claims.get("name"),
        email=claims.get("email"),
        is_admin=is_admin,
        official=official,
    )
