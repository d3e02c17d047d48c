from fastapi import APIRouter, Depends, status

from citizen_portal.api.deps import get_audit_service, get_token_issuer
from citizen_portal.core.errors import failure_message
from citizen_portal.core.security import TokenIssuer
from citizen_portal.db.mongo import get_db
from citizen_portal.mapper.citizens_mapper import to_citizen_out
from citizen_portal.schemas.citizen import CitizenOut, LoginRequest, LoginResponse, RegisterRequest
from citizen_portal.services import citizens_service
from citizen_portal.services.audit_service import AuditService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# =========================
# Register - Citizen
# =========================
@router.post("/register", response_model=CitizenOut, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db=Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to register citizen"):
        doc = await citizens_service.register_citizen(db, body)
        await audit.record(
            "citizen.register", doc, "citizen", doc["_id"],
            f"New citizen registered ({doc['email']})",
        )
    return to_citizen_out(doc)


# =========================
# Login
# =========================
@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db=Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
    audit: AuditService = Depends(get_audit_service),
):
    with failure_message("Failed to login"):
        doc, token = await citizens_service.login(db, body.email, body.password, issuer)
        await audit.record(
            "citizen.login", doc, "citizen", doc["_id"],
            f"Citizen logged in ({doc['email']})",
        )
    return {"citizen": to_citizen_out(doc), "token": token}
