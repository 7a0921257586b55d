"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers (users, events,
participations, etc.) under a unified prefix.  When new domains are
introduced, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    categories,
    comments,
    events,
    faqs,
    info,
    likes,
    mail,
    participations,
    parties,
    posts,
    uploads,
    users,
)

# Create a router for version 1 and include sub-routers for each domain.
router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(mail.router, prefix="/email", tags=["email"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(parties.router, prefix="/parties", tags=["parties"])
router.include_router(participations.router, prefix="/participations", tags=["participations"])
router.include_router(comments.router, prefix="/comments", tags=["comments"])
router.include_router(likes.router, prefix="/likes", tags=["likes"])
router.include_router(faqs.router, prefix="/faqs", tags=["faqs"])
router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
router.include_router(info.router, prefix="/info", tags=["info"])
