"""
Operations behind the named procedures.

Queries answer anonymous callers with an empty value; mutations and gated
reads go through the authorizer and raise on denial.
"""
from __future__ import annotations

import logging

from pymongo.errors import DuplicateKeyError

from citizen_portal.core import authz
from citizen_portal.core.authz import Identity
from citizen_portal.core.config import Settings
from citizen_portal.core.enums import DenyReason, PortalComplaintStatus
from citizen_portal.core.errors import NotFoundError
from citizen_portal.db.mongo import (
    ADMINS,
    CATEGORIES,
    CITIZENS,
    OFFICIALS,
    PORTAL_COMPLAINTS,
    RESPONSES,
)
from citizen_portal.mapper.citizens_mapper import to_citizen_out
from citizen_portal.mapper.complaints_mapper import (
    to_category_out,
    to_official_out,
    to_portal_complaint_out,
)
from citizen_portal.models.common import oid_str, parse_oid, utcnow
from citizen_portal.repositories.citizen_repository import CitizenRepository
from citizen_portal.repositories.portal_repository import (
    AdminRepository,
    CategoryRepository,
    OfficialRepository,
    PortalComplaintRepository,
    ResponseRepository,
)
from citizen_portal.services import uploads_service

logger = logging.getLogger(__name__)


async def _expand(db, settings: Settings, docs: list, with_submitter: bool = False) -> list:
    categories = await CategoryRepository(db[CATEGORIES]).get_by_ids(
        {str(d.get("category_id")) for d in docs}
    )
    submitters = {}
    if with_submitter:
        submitters = await CitizenRepository(db[CITIZENS]).get_by_ids(
            {str(d.get("submitter_id")) for d in docs}
        )

    responses = ResponseRepository(db[RESPONSES])
    out = []
    for d in docs:
        item = to_portal_complaint_out(
            d,
            category=categories.get(str(d.get("category_id"))),
            responses=await responses.list_for(d["_id"]),
            attachment_url=await uploads_service.attachment_url(db, settings, d.get("attachment_id")),
        )
        if with_submitter:
            submitter = submitters.get(str(d.get("submitter_id")))
            item["submitter"] = (submitter or {}).get("name") or "Anonymous"
        out.append(item)
    return out


# -------------------------
# auth.*
# -------------------------
async def logged_in_user(db, identity: Identity | None, args, settings: Settings):
    if identity is None:
        return None
    doc = await CitizenRepository(db[CITIZENS]).get_by_id(identity.id)
    return to_citizen_out(doc) if doc else None


# -------------------------
# complaints.*
# -------------------------
async def create_complaint(db, identity: Identity | None, args, settings: Settings) -> str:
    authz.enforce(authz.require_identity(identity))

    category = await CategoryRepository(db[CATEGORIES]).get(args.category_id)
    if not category:
        raise NotFoundError("Category not found")
    await uploads_service.require_attachment(db, args.attachment_id)

    doc = await PortalComplaintRepository(db[PORTAL_COMPLAINTS]).insert({
        "title": args.title,
        "description": args.description,
        "category_id": category["_id"],
        "location": args.location,
        "status": PortalComplaintStatus.pending.value,
        "submitter_id": parse_oid(identity.id),
        "attachment_id": args.attachment_id,
        "attachment_name": args.attachment_name if args.attachment_id else None,
        "created_at": utcnow(),
    })
    logger.info("Portal complaint %s created by %s", doc["_id"], identity.id)
    return oid_str(doc["_id"])


async def list_user_complaints(db, identity: Identity | None, args, settings: Settings) -> list:
    if identity is None:
        return []
    docs = await PortalComplaintRepository(db[PORTAL_COMPLAINTS]).list_by_submitter(identity.id)
    return await _expand(db, settings, docs)


async def list_categories(db, identity: Identity | None, args, settings: Settings) -> list:
    return [to_category_out(c) for c in await CategoryRepository(db[CATEGORIES]).list()]


async def add_response(db, identity: Identity | None, args, settings: Settings) -> str:
    authz.enforce(authz.require_identity(identity))

    complaints = PortalComplaintRepository(db[PORTAL_COMPLAINTS])
    complaint = await complaints.get(args.complaint_id)
    if not complaint:
        raise NotFoundError("Complaint not found")
    await uploads_service.require_attachment(db, args.attachment_id)

    doc = await ResponseRepository(db[RESPONSES]).insert({
        "complaint_id": complaint["_id"],
        "responder_name": authz.responder_name(identity),
        "message": args.message,
        "is_official": identity.is_official,
        "attachment_id": args.attachment_id,
        "created_at": utcnow(),
    })

    if identity.is_official:
        await complaints.set_status(complaint["_id"], PortalComplaintStatus.responded.value)

    return oid_str(doc["_id"])


async def is_official(db, identity: Identity | None, args, settings: Settings) -> bool:
    return identity is not None and identity.is_official


async def get_official_category(db, identity: Identity | None, args, settings: Settings):
    if identity is None or identity.official is None:
        return None
    category = await CategoryRepository(db[CATEGORIES]).get(identity.official.category_id)
    return to_category_out(category)


async def list_category_complaints(db, identity: Identity | None, args, settings: Settings) -> list:
    authz.enforce(authz.require_official(identity))
    docs = await PortalComplaintRepository(db[PORTAL_COMPLAINTS]).list_by_category(
        identity.official.category_id
    )
    return await _expand(db, settings, docs, with_submitter=True)


async def generate_upload_url(db, identity: Identity | None, args, settings: Settings) -> str:
    return await uploads_service.generate_upload_url(db, identity, settings)


async def get_attachment_url(db, identity: Identity | None, args, settings: Settings):
    return await uploads_service.attachment_url(db, settings, args.storage_id)


# -------------------------
# admin.*
# -------------------------
async def is_admin(db, identity: Identity | None, args, settings: Settings) -> bool:
    return identity is not None and identity.is_admin


async def add_category(db, identity: Identity | None, args, settings: Settings) -> str:
    authz.enforce(authz.require_admin(identity))

    doc = await CategoryRepository(db[CATEGORIES]).insert({
        "name": args.name.strip(),
        "description": args.description,
        "created_at": utcnow(),
    })
    return oid_str(doc["_id"])


async def add_official(db, identity: Identity | None, args, settings: Settings) -> str:
    authz.enforce(authz.require_admin(identity))

    user = await CitizenRepository(db[CITIZENS]).get_by_email(args.email)
    if not user:
        raise NotFoundError("User not found")

    category = await CategoryRepository(db[CATEGORIES]).get(args.category_id)
    if not category:
        raise NotFoundError("Category not found")

    officials = OfficialRepository(db[OFFICIALS])
    authz.enforce(authz.can_appoint_official(identity, await officials.get_by_user(user["_id"])))

    try:
        doc = await officials.insert({
            "user_id": user["_id"],
            "category_id": category["_id"],
            "title": args.title.strip(),
        })
    except DuplicateKeyError:
        # a concurrent appointment won the race
        authz.enforce(authz.deny(DenyReason.already_official, "User is already an official"))

    logger.info("User %s appointed official of %s", user["_id"], category.get("name"))
    return oid_str(doc["_id"])


async def list_officials(db, identity: Identity | None, args, settings: Settings) -> list:
    authz.enforce(authz.require_admin(identity))

    docs = await OfficialRepository(db[OFFICIALS]).list()
    users = await CitizenRepository(db[CITIZENS]).get_by_ids({str(d.get("user_id")) for d in docs})
    categories = await CategoryRepository(db[CATEGORIES]).get_by_ids({str(d.get("category_id")) for d in docs})
    return [
        to_official_out(d, users.get(str(d.get("user_id"))), categories.get(str(d.get("category_id"))))
        for d in docs
    ]


async def grant_admin(db, user_id) -> None:
    """Give a user the admin role (used when seeding an installation)."""
    oid = parse_oid(user_id)
    if oid is None:
        raise NotFoundError("User not found")
    admins = AdminRepository(db[ADMINS])
    if not await admins.is_admin(oid):
        await admins.insert(oid)
