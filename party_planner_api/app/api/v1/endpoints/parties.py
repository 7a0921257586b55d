"""Party endpoints for API v1; same routes as events, created by base users."""

from party_planner_api.app.schemas.participation import ParentKind

from .events import build_router

router = build_router(ParentKind.PARTY)
