from pydantic import BaseModel, field_validator

from onfindr.schemas.business import check_email, check_phone, optional_text


class WaitlistRequest(BaseModel):
    email: str
    name: str | None = None
    phone: str | None = None

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        return check_email(v).lower()

    @field_validator("name")
    @classmethod
    def blank_name_is_absent(cls, v: str | None) -> str | None:
        return optional_text(v, "Name")

    @field_validator("phone")
    @classmethod
    def normalize_uk_phone(cls, v: str | None) -> str | None:
        phone = optional_text(v, "Phone number")
        if phone is None:
            return None
        try:
            return check_phone(phone)
        except ValueError:
            return phone


class WaitlistResponse(BaseModel):
    success: bool = True
    id: str
    created: bool
