import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.core.config import ScheduleConfig
from booking_api.core.errors import StoredDataError
from booking_api.models.appointment import Appointment
from booking_api.services.validators import is_bookable_day, parse_date

logger = logging.getLogger(__name__)

_DATETIME_SEPARATOR = "T"


def generate_time_slots(schedule: ScheduleConfig) -> list[str]:
    """Slot start times as HH:MM for one business day, minus the blocked window."""
    slots: list[str] = []
    current = datetime.combine(date.min, time(schedule.business_start_hour))
    end = datetime.combine(date.min, time(0)) + timedelta(hours=schedule.business_end_hour)
    delta = timedelta(minutes=schedule.slot_duration_minutes)
    while current < end:
        slot = current.strftime("%H:%M")
        # HH:MM strings order the same as the times they name
        if not schedule.blocked_start <= slot < schedule.blocked_end:
            slots.append(slot)
        current += delta
    return slots


def normalize_booked_time(value: object) -> str:
    """Reduce a stored time value to HH:MM.

    Drivers hand back TIME columns as time objects, plain strings ("14:00:00")
    or timestamp-like strings ("0000-01-01T14:00:00Z"). Anything that does not
    reduce to HH:MM raises StoredDataError.
    """
    if isinstance(value, (time, datetime)):
        return value.strftime("%H:%M")
    raw = str(value or "").strip()
    if _DATETIME_SEPARATOR in raw:
        raw = raw.split(_DATETIME_SEPARATOR, 1)[1]
    hhmm = raw[:5]
    try:
        if len(hhmm) != 5:
            raise ValueError(hhmm)
        datetime.strptime(hhmm, "%H:%M")
    except ValueError as e:
        logger.error("Malformed appointment time in storage: %r", value)
        raise StoredDataError("Malformed appointment time in storage") from e
    return hhmm


async def get_booked_times(session: AsyncSession, date_str: str) -> set[str]:
    result = await session.execute(select(Appointment.time).where(Appointment.date == date_str))
    return {normalize_booked_time(row[0]) for row in result.all()}


async def get_slots_for_date(
    session: AsyncSession, date_str: str, schedule: ScheduleConfig
) -> list[tuple[str, bool]]:
    """Returns list of (time, is_booked). Empty if the weekday is not bookable."""
    d = parse_date(date_str)
    if not is_bookable_day(d, schedule):
        return []
    booked = await get_booked_times(session, date_str)
    return [(s, s in booked) for s in generate_time_slots(schedule)]
