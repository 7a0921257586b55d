"""
Information endpoint for API v1.

Returns the service name, its version and the current server time.
Clients use it as a liveness check.  Publicly accessible.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from party_planner_api.app.core.config import Settings, get_settings
from party_planner_api.app.core.db import utcnow

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "name": settings.project_name,
        "version": settings.api_version,
        "server_time": utcnow().isoformat(),
    }
