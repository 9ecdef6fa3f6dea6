from pydantic import BaseModel, ConfigDict, Field


class ContactRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(default=None, alias="fullName")
    email: str | None = None


class ContactResponse(BaseModel):
    success: bool = True
    message: str
