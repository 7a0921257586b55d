"""
Participation endpoints for API v1.

``POST`` registers the caller for an event or party, ``DELETE`` cancels
the registration and ``GET`` lists the registered users.  Only base
users can register.  A full event answers with the configured capacity
status (409 by default); a second registration by the same user
answers 409.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.participation import ParentKind, ParticipationRead
from party_planner_api.app.schemas.user import UserRead
from party_planner_api.app.services.participation_service import ParticipationService

router = APIRouter()

# URL segment -> kind of parent
SEGMENTS = {
    "events": ParentKind.EVENT,
    "parties": ParentKind.PARTY,
}


def _add_routes(segment: str, kind: ParentKind) -> None:
    path = f"/{segment}/{{parent_id}}"

    @router.post(path, response_model=ParticipationRead, status_code=status.HTTP_201_CREATED, name=f"register_{kind.value}")
    async def register(
        parent_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        db: Database = Depends(get_db),
    ) -> ParticipationRead:
        return await ParticipationService.register(db, kind, current_user, parent_id)

    @router.delete(path, status_code=status.HTTP_204_NO_CONTENT, name=f"unregister_{kind.value}")
    async def unregister(
        parent_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        db: Database = Depends(get_db),
    ) -> None:
        await ParticipationService.unregister(db, kind, current_user, parent_id)
        return None

    @router.get(path, response_model=List[UserRead], name=f"list_{kind.value}_participants")
    async def list_participants(parent_id: str, db: Database = Depends(get_db)) -> List[UserRead]:
        return await ParticipationService.list_participants(db, kind, parent_id)


for _segment, _kind in SEGMENTS.items():
    _add_routes(_segment, _kind)
