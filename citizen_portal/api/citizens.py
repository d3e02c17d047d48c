from fastapi import APIRouter, Depends

from citizen_portal.api.deps import get_current_identity
from citizen_portal.core.authz import Identity
from citizen_portal.core.errors import failure_message
from citizen_portal.db.mongo import get_db
from citizen_portal.schemas.citizen import CitizenProfileOut
from citizen_portal.services import citizens_service

router = APIRouter(prefix="/api/citizen", tags=["Citizens"])


@router.get("/profile", response_model=CitizenProfileOut)
async def profile(identity: Identity = Depends(get_current_identity), db=Depends(get_db)):
    with failure_message("Failed to fetch profile"):
        return await citizens_service.get_profile(db, identity.id)
