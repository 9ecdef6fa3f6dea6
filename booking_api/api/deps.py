from booking_api.core.config import ScheduleConfig, settings
from booking_api.core.db import get_session
from booking_api.services.email_service import ContactMailer, ResendMailer

__all__ = ["get_mailer", "get_schedule", "get_session"]


def get_schedule() -> ScheduleConfig:
    """Booking grid from settings; override in tests for a different week."""
    return settings.schedule


def get_mailer() -> ContactMailer:
    return ResendMailer(settings)
