"""
E-mail endpoints for API v1.

``/send`` relays a message through the e-mail provider; ``/verify``
consumes the verification token that registration handed out.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.schemas.common import MessageResponse
from party_planner_api.app.schemas.mail import EmailSend, EmailSent
from party_planner_api.app.services.email_service import SendGridEmailSender, get_email_sender
from party_planner_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/send", response_model=EmailSent)
async def send_email(
    message: EmailSend,
    sender: SendGridEmailSender = Depends(get_email_sender),
) -> EmailSent:
    """Send an e-mail; provider failures answer 502."""
    return await run_in_threadpool(sender.send, message)


@router.get("/verify", response_model=MessageResponse)
async def verify_account(token: str = Query(..., min_length=1), db: Database = Depends(get_db)) -> MessageResponse:
    """Mark the account owning ``token`` as verified.

    404 for an unknown token, 400 when the account is already verified.
    """
    await UserService.verify_account(db, token)
    return MessageResponse(message="Account verified")
