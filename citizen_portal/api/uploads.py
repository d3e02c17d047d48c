from fastapi import APIRouter, Depends, Request

from citizen_portal.api.deps import get_app_settings
from citizen_portal.core.config import Settings
from citizen_portal.core.errors import failure_message
from citizen_portal.db.mongo import get_db
from citizen_portal.services import uploads_service

router = APIRouter(prefix="/api/uploads", tags=["Uploads"])


# =========================
# Upload bytes to a URL issued by complaints.generate_upload_url
# =========================
@router.post("/{token}")
async def upload(
    token: str,
    request: Request,
    db=Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    with failure_message("Failed to upload file"):
        data = await request.body()
        return await uploads_service.store_upload(
            db, settings, token, data, request.headers.get("content-type"),
        )
