"""
Upload signing endpoints for API v1.

Returns the parameters a client needs to upload a picture directly to
the image host.  Post and party pictures need a base user token, event
pictures an organizer token; profile photos can be signed anonymously.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from party_planner_api.app.core.config import Settings, get_settings
from party_planner_api.app.core.security import CurrentUser, get_optional_user
from party_planner_api.app.schemas.upload import UploadSignature
from party_planner_api.app.services.upload_service import UploadContext, UploadService

router = APIRouter()


@router.post("/{context}/signature", response_model=UploadSignature)
async def sign_upload(
    context: UploadContext,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
) -> UploadSignature:
    return UploadService.sign_upload(settings, context, current_user)
