import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.api.deps import get_schedule, get_session
from booking_api.api.schemas.appointment import (
    AvailableSlotsResponse,
    BookAppointmentRequest,
    BookAppointmentResponse,
    SlotInfo,
)
from booking_api.core.config import ScheduleConfig
from booking_api.core.errors import InvalidInput
from booking_api.models.appointment import Appointment, AppointmentPublic
from booking_api.services.appointment_service import create_appointment, validate_booking_request
from booking_api.services.slot_service import get_slots_for_date

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=int(a.id),
        name=a.name,
        email=a.email,
        date=a.date,
        time=a.time,
        message=a.message,
    )


@router.get("", response_model=AvailableSlotsResponse)
async def available_slots(
    date_param: str | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
    schedule: ScheduleConfig = Depends(get_schedule),
) -> AvailableSlotsResponse:
    """Return every slot of the day with isBooked; empty list on non-bookable weekdays."""
    if not date_param:
        raise InvalidInput("Date is required")
    slots = await get_slots_for_date(session, date_param, schedule)
    return AvailableSlotsResponse(slots=[SlotInfo(time=t, is_booked=booked) for t, booked in slots])


@router.post("", response_model=BookAppointmentResponse, response_model_exclude_none=True)
async def book_appointment(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    schedule: ScheduleConfig = Depends(get_schedule),
) -> BookAppointmentResponse:
    data = validate_booking_request(body, schedule)
    appointment = await create_appointment(session, data)
    return BookAppointmentResponse(
        success=True,
        message="Appointment booked successfully",
        appointment=_to_public(appointment),
    )
