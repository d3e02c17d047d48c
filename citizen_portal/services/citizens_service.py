from __future__ import annotations

import logging

from pymongo.errors import DuplicateKeyError

from citizen_portal.core.errors import AuthenticationError, ConflictError, NotFoundError
from citizen_portal.core.security import TokenIssuer, hash_password, verify_password
from citizen_portal.db.mongo import CITIZENS, COMPLAINTS
from citizen_portal.mapper.citizens_mapper import to_citizen_out
from citizen_portal.mapper.complaints_mapper import to_complaint_out
from citizen_portal.models.common import utcnow
from citizen_portal.repositories.citizen_repository import CitizenRepository, email_norm
from citizen_portal.repositories.complaint_repository import ComplaintRepository

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Email already in use"


def _phone_norm(phone: str | None) -> str | None:
    if not phone:
        return None
    p = phone.strip()
    return p if p else None


async def register_citizen(db, body) -> dict:
    repo = CitizenRepository(db[CITIZENS])

    # storage enforces uniqueness too; this keeps the common case cheap
    if await repo.get_by_email(body.email):
        raise ConflictError(DUPLICATE_EMAIL, status_code=400)

    doc = {
        "name": body.name.strip(),
        "email": email_norm(body.email),
        "password_hash": hash_password(body.password),
        "phone": _phone_norm(body.phone),
        "address": body.address,
        "created_at": utcnow(),
    }

    try:
        doc = await repo.insert(doc)
    except DuplicateKeyError:
        raise ConflictError(DUPLICATE_EMAIL, status_code=400)

    logger.info("Citizen registered: %s", doc["email"])
    return doc


async def login(db, email: str, password: str, issuer: TokenIssuer):
    """
    Returns (citizen document, token). Unknown email and wrong password give
    the same error.
    """
    doc = await CitizenRepository(db[CITIZENS]).get_by_email(email)
    if not doc or not verify_password(password, doc.get("password_hash")):
        logger.info("Failed login for %s", email_norm(email))
        raise AuthenticationError("Invalid credentials")

    out = to_citizen_out(doc)
    token = issuer.issue({"id": out["id"], "name": out["name"], "email": out["email"]})
    return doc, token


async def get_profile(db, citizen_id: str) -> dict:
    doc = await CitizenRepository(db[CITIZENS]).get_by_id(citizen_id)
    if not doc:
        raise NotFoundError("Citizen not found")

    complaints = await ComplaintRepository(db[COMPLAINTS]).list_by_citizen(citizen_id)
    profile = to_citizen_out(doc)
    profile["complaints"] = [to_complaint_out(c) for c in complaints]
    return profile
