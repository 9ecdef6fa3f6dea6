from pydantic import BaseModel, ConfigDict, Field

from booking_api.models.appointment import AppointmentPublic


class SlotInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: str  # HH:MM
    is_booked: bool = Field(alias="isBooked")


class AvailableSlotsResponse(BaseModel):
    slots: list[SlotInfo]


class BookAppointmentRequest(BaseModel):
    # All optional so missing fields get our own 400 message instead of a 422
    name: str | None = None
    email: str | None = None
    date: str | None = None
    time: str | None = None
    message: str | None = None


class BookAppointmentResponse(BaseModel):
    success: bool = True
    message: str
    appointment: AppointmentPublic
