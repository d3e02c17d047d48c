"""
Named procedures of the reactive portal.

Every call is ``POST /api/rpc/{name}`` with ``{"args": {...}}``; the
answer is ``{"value": ...}``. A bearer token is optional at this layer;
each procedure decides through the authorizer what an anonymous caller
gets.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pydantic import ValidationError as ArgsValidationError

from citizen_portal.api.deps import get_app_settings, get_audit_service, get_optional_identity
from citizen_portal.core.authz import Identity
from citizen_portal.core.config import Settings
from citizen_portal.core.errors import NotFoundError, ValidationError, failure_message
from citizen_portal.db.mongo import get_db
from citizen_portal.schemas.portal import (
    AddCategoryArgs,
    AddOfficialArgs,
    AddResponseArgs,
    AttachmentUrlArgs,
    CreatePortalComplaintArgs,
    NoArgs,
    ProcedureCall,
    ProcedureResult,
)
from citizen_portal.services import portal_service
from citizen_portal.services.audit_service import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rpc", tags=["Portal"])


@dataclass(frozen=True)
class Procedure:
    handler: Callable[..., Awaitable]
    args_model: Type[BaseModel] = NoArgs
    # (event type, entity type) recorded after a successful call
    audit: Optional[Tuple[str, str]] = None


PROCEDURES = {
    "auth.logged_in_user": Procedure(portal_service.logged_in_user),

    "complaints.create_complaint": Procedure(
        portal_service.create_complaint, CreatePortalComplaintArgs,
        ("portal_complaint.create", "portal_complaint"),
    ),
    "complaints.list_user_complaints": Procedure(portal_service.list_user_complaints),
    "complaints.list_categories": Procedure(portal_service.list_categories),
    "complaints.add_response": Procedure(
        portal_service.add_response, AddResponseArgs,
        ("response.create", "response"),
    ),
    "complaints.is_official": Procedure(portal_service.is_official),
    "complaints.get_official_category": Procedure(portal_service.get_official_category),
    "complaints.list_category_complaints": Procedure(portal_service.list_category_complaints),
    "complaints.generate_upload_url": Procedure(portal_service.generate_upload_url),
    "complaints.get_attachment_url": Procedure(portal_service.get_attachment_url, AttachmentUrlArgs),

    "admin.is_admin": Procedure(portal_service.is_admin),
    "admin.add_category": Procedure(
        portal_service.add_category, AddCategoryArgs,
        ("category.create", "category"),
    ),
    "admin.add_official": Procedure(
        portal_service.add_official, AddOfficialArgs,
        ("official.create", "official"),
    ),
    "admin.list_officials": Procedure(portal_service.list_officials),
}


def _parse_args(proc: Procedure, raw: dict) -> BaseModel:
    try:
        return proc.args_model.model_validate(raw)
    except ArgsValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"{loc}: {first.get('msg')}" if loc else str(first.get("msg")))


@router.get("")
async def list_procedures():
    return sorted(PROCEDURES)


@router.post("/{name}", response_model=ProcedureResult)
async def call_procedure(
    name: str,
    call: Optional[ProcedureCall] = None,
    identity: Optional[Identity] = Depends(get_optional_identity),
    db=Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    audit: AuditService = Depends(get_audit_service),
):
    proc = PROCEDURES.get(name)
    if proc is None:
        raise NotFoundError(f"Unknown procedure: {name}")

    args = _parse_args(proc, call.args if call else {})

    with failure_message(f"Failed to run {name}"):
        value = await proc.handler(db, identity, args, settings)

        if proc.audit:
            event_type, entity_type = proc.audit
            await audit.record(
                event_type, identity, entity_type, value,
                f"{name} by {identity.email if identity else 'anonymous'}",
                args.model_dump(),
            )

    return {"value": value}
