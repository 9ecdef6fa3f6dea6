from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.api.deps import get_mailer, get_session
from booking_api.api.schemas.contact import ContactRequest, ContactResponse
from booking_api.services.contact_service import record_contact
from booking_api.services.email_service import ContactMailer

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("", response_model=ContactResponse)
async def create_contact(
    body: ContactRequest,
    session: AsyncSession = Depends(get_session),
    mailer: ContactMailer = Depends(get_mailer),
) -> ContactResponse:
    """Store the lead, then try to send the blueprint email. Email failures are only logged."""
    await record_contact(session, body, mailer)
    return ContactResponse(success=True, message="Contact saved successfully")
