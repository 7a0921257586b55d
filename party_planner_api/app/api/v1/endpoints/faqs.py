"""
FAQ endpoints for API v1.

Base users ask questions about events; the event's organizer answers
them through ``PATCH``.  Only the asking user deletes a question.
Listing and retrieving entries is publicly accessible.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.faq import FAQAnswer, FAQCreate, FAQRead
from party_planner_api.app.services.faq_service import FAQService

router = APIRouter()


@router.post("/", response_model=FAQRead, status_code=status.HTTP_201_CREATED)
async def create_faq(
    faq_in: FAQCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> FAQRead:
    """Ask a question about an event (base users only)."""
    return await FAQService.create_faq(db, faq_in, current_user)


@router.get("/event/{event_id}", response_model=List[FAQRead])
async def list_event_faqs(event_id: str, db: Database = Depends(get_db)) -> List[FAQRead]:
    return await FAQService.list_by_event(db, event_id)


@router.get("/{faq_id}", response_model=FAQRead)
async def get_faq(faq_id: str, db: Database = Depends(get_db)) -> FAQRead:
    return await FAQService.get_faq(db, faq_id)


@router.patch("/{faq_id}", response_model=FAQRead)
async def answer_faq(
    faq_id: str,
    answer: FAQAnswer,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> FAQRead:
    """Answer a question (organizer of the event only)."""
    return await FAQService.answer_faq(db, faq_id, answer, current_user)


@router.delete("/{faq_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faq(
    faq_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    await FAQService.delete_faq(db, faq_id, current_user)
    return None
