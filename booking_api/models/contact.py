from sqlmodel import Field, SQLModel


class Contact(SQLModel, table=True):
    __tablename__ = "contacts"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True)


class ContactCreate(SQLModel):
    name: str
    email: str
