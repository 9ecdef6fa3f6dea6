import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from booking_api.api.schemas.contact import ContactRequest
from booking_api.core.errors import InternalError
from booking_api.models.contact import Contact, ContactCreate
from booking_api.services.email_service import ContactMailer
from booking_api.services.validators import require_fields, validate_email

logger = logging.getLogger(__name__)


def validate_contact_request(body: ContactRequest) -> ContactCreate:
    require_fields("Full name and email are required", body.full_name, body.email)
    email = validate_email(body.email)
    return ContactCreate(name=body.full_name.strip(), email=email)


async def save_contact(session: AsyncSession, data: ContactCreate) -> Contact:
    contact = Contact(name=data.name, email=data.email)
    session.add(contact)
    try:
        # Commit before emailing so a failed send can never lose the lead
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Insert contact failed: %s", e)
        raise InternalError("Error saving contact") from e
    return contact


async def record_contact(session: AsyncSession, body: ContactRequest, mailer: ContactMailer) -> Contact:
    data = validate_contact_request(body)
    contact = await save_contact(session, data)
    try:
        sent = await run_in_threadpool(mailer.send_contact_email, contact.email, contact.name)
    except Exception as e:
        logger.exception("Email sender raised for contact %s: %s", contact.id, e)
        sent = False
    if not sent:
        logger.warning("Contact %s stored but email to %s was not sent", contact.id, contact.email)
    return contact
