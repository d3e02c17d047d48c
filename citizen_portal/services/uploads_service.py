"""
Two-step attachment upload.

1. An authenticated caller asks for an upload URL; a single-use ticket is
   stored and embedded in the URL.
2. The file bytes are posted to that URL; the ticket is consumed and the
   stored file gets a storage id that complaints and responses reference.

Nothing links step 2 to a later complaint or response, so an upload that is
never referenced stays on disk.
"""
from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path

from citizen_portal.core import authz
from citizen_portal.core.authz import Identity
from citizen_portal.core.config import Settings
from citizen_portal.core.errors import NotFoundError, ValidationError
from citizen_portal.db.mongo import ATTACHMENTS, UPLOAD_TICKETS
from citizen_portal.models.common import parse_oid, utcnow
from citizen_portal.repositories.upload_repository import UploadRepository

logger = logging.getLogger(__name__)

FILES_ROUTE = "/files"


def _repo(db) -> UploadRepository:
    return UploadRepository(db[UPLOAD_TICKETS], db[ATTACHMENTS])


def _ext_for(content_type: str | None) -> str:
    if not content_type:
        return ""
    return mimetypes.guess_extension(content_type.split(";")[0].strip()) or ""


async def generate_upload_url(db, identity: Identity | None, settings: Settings) -> str:
    authz.enforce(authz.require_identity(identity))

    token = uuid.uuid4().hex
    await _repo(db).create_ticket({
        "token": token,
        "user_id": parse_oid(identity.id),
        "used": False,
        "created_at": utcnow(),
    })
    return f"{settings.base_url}/api/uploads/{token}"


async def store_upload(db, settings: Settings, token: str, data: bytes, content_type: str | None) -> dict:
    if not data:
        raise ValidationError("Empty upload")
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(f"Upload exceeds {settings.max_upload_bytes} bytes")

    repo = _repo(db)
    ticket = await repo.claim_ticket(token)
    if not ticket:
        raise NotFoundError("Upload URL is invalid or already used")

    storage_id = uuid.uuid4().hex
    filename = f"{storage_id}{_ext_for(content_type)}"

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / filename).write_bytes(data)

    await repo.insert_attachment({
        "_id": storage_id,
        "filename": filename,
        "content_type": content_type,
        "size": len(data),
        "uploaded_by": ticket.get("user_id"),
        "created_at": utcnow(),
    })
    logger.info("Stored upload %s (%d bytes)", filename, len(data))
    return {"storage_id": storage_id}


async def attachment_url(db, settings: Settings, storage_id: str | None) -> str | None:
    doc = await _repo(db).get_attachment(storage_id)
    if not doc:
        return None
    return f"{settings.base_url}{FILES_ROUTE}/{doc['filename']}"


async def require_attachment(db, storage_id: str | None) -> None:
    """Reject references to storage ids that were never uploaded."""
    if storage_id and not await _repo(db).get_attachment(storage_id):
        raise ValidationError("Unknown attachment")
