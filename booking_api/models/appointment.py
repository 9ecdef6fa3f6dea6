from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class AppointmentBase(SQLModel):
    name: str
    email: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    message: str | None = None


class Appointment(AppointmentBase, table=True):
    __tablename__ = "appointments"
    # no double booking: one appointment per (date, time)
    __table_args__ = (UniqueConstraint("date", "time", name="uq_appointments_date_time"),)
    id: int | None = Field(default=None, primary_key=True)


class AppointmentCreate(SQLModel):
    name: str
    email: str
    date: str
    time: str
    message: str | None = None


class AppointmentPublic(AppointmentBase):
    id: int
