"""
Event endpoints for API v1.

Events and parties expose the same routes; ``build_router`` creates
them for one ``ParentKind`` and ``parties.py`` reuses it.  Creation is
role gated (organizers create events, base users create parties) and
only the creator may delete.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.event import EventCreate, EventRead
from party_planner_api.app.schemas.geo import PointQuery, RadiusQuery
from party_planner_api.app.schemas.participation import ParentKind
from party_planner_api.app.services.event_service import EventService


def build_router(kind: ParentKind) -> APIRouter:
    """Return the CRUD and search routes for events or parties."""
    router = APIRouter()

    @router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
    async def create_event(
        event: EventCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: Database = Depends(get_db),
    ) -> EventRead:
        """Create an event owned by the caller.

        The category must exist (404) and ``start_time`` must not be in
        the past (400).
        """
        return await EventService.create_event(db, kind, event, current_user)

    @router.get("/", response_model=List[EventRead])
    async def list_events(db: Database = Depends(get_db)) -> List[EventRead]:
        return await EventService.list_events(db, kind)

    @router.post("/search", response_model=List[EventRead])
    async def search_events(query: RadiusQuery, db: Database = Depends(get_db)) -> List[EventRead]:
        """Events within ``rad`` km of (``lat``, ``lng``), boundary included."""
        return await EventService.search_radius(db, kind, query)

    @router.post("/location", response_model=List[EventRead])
    async def events_at_location(query: PointQuery, db: Database = Depends(get_db)) -> List[EventRead]:
        return await EventService.find_at(db, kind, query)

    @router.get("/organizer/{user_id}", response_model=List[EventRead])
    async def list_by_organizer(user_id: str, db: Database = Depends(get_db)) -> List[EventRead]:
        return await EventService.list_by_organizer(db, kind, user_id)

    @router.get("/category/{category_id}", response_model=List[EventRead])
    async def list_by_category(category_id: str, db: Database = Depends(get_db)) -> List[EventRead]:
        return await EventService.list_by_category(db, kind, category_id)

    @router.get("/{event_id}", response_model=EventRead)
    async def get_event(event_id: str, db: Database = Depends(get_db)) -> EventRead:
        return await EventService.get_event(db, kind, event_id)

    @router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_event(
        event_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        db: Database = Depends(get_db),
    ) -> None:
        """Delete the event and its participations (creator only)."""
        await EventService.delete_event(db, kind, event_id, current_user)
        return None

    return router


router = build_router(ParentKind.EVENT)
