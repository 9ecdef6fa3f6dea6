from booking_api.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from booking_api.models.contact import Contact, ContactCreate

__all__ = [
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "Contact",
    "ContactCreate",
]
