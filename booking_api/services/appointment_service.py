import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.api.schemas.appointment import BookAppointmentRequest
from booking_api.core.config import ScheduleConfig
from booking_api.core.errors import Conflict, InternalError, InvalidInput
from booking_api.models.appointment import Appointment, AppointmentCreate
from booking_api.services.slot_service import generate_time_slots
from booking_api.services.validators import is_bookable_day, parse_date, parse_time, require_fields, validate_email

logger = logging.getLogger(__name__)


def validate_booking_request(body: BookAppointmentRequest, schedule: ScheduleConfig) -> AppointmentCreate:
    """Checks that need no storage, in order; first failure wins."""
    require_fields("Name, email, date, and time are required", body.name, body.email, body.date, body.time)
    email = validate_email(body.email)
    d = parse_date(body.date)
    if not is_bookable_day(d, schedule):
        raise InvalidInput("This day is not available for appointments")
    if parse_time(body.time) not in generate_time_slots(schedule):
        raise InvalidInput("This time slot is not available")
    return AppointmentCreate(
        name=body.name.strip(),
        email=email,
        date=body.date,
        time=body.time,
        message=body.message,
    )


async def find_appointment(session: AsyncSession, date_str: str, time_str: str) -> Appointment | None:
    result = await session.execute(
        select(Appointment).where(Appointment.date == date_str, Appointment.time == time_str)
    )
    return result.scalars().first()


async def create_appointment(session: AsyncSession, data: AppointmentCreate) -> Appointment:
    try:
        existing = await find_appointment(session, data.date, data.time)
    except SQLAlchemyError as e:
        logger.exception("Slot lookup failed for %s %s: %s", data.date, data.time, e)
        raise InternalError("Database error") from e
    if existing:
        raise Conflict("This time slot is already booked")
    appointment = Appointment(
        name=data.name,
        email=data.email,
        date=data.date,
        time=data.time,
        message=data.message,
    )
    session.add(appointment)
    try:
        await session.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent booking; the unique constraint caught it
        await session.rollback()
        raise Conflict("This time slot is already booked") from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Insert appointment failed: %s", e)
        raise InternalError("Error creating appointment") from e
    await session.refresh(appointment)
    logger.info("Appointment %s booked for %s %s", appointment.id, appointment.date, appointment.time)
    return appointment
