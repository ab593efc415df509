"""
Field rules for business listings.

Each rule takes the raw (untyped) value of one field and either returns the
normalized value or raises ValueError with the user-facing message. The same
rules back the pydantic form below and single-field live feedback.
"""
import re
from datetime import time
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onfindr.models.business import BusinessSubmission

NAME_MIN, NAME_MAX = 2, 100
DESCRIPTION_MIN, DESCRIPTION_MAX = 10, 500

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$")
TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

# Raw phone input may carry spaces and common punctuation; everything but
# digits and a leading "+" is dropped before the UK pattern is applied.
_PHONE_CHARS_RE = re.compile(r"^\+?[0-9\s\-().]+$")
_UK_PHONE_RE = re.compile(r"^(?:(?:\+44|44|0)[1-9][0-9]{8,9}|7[0-9]{9})$")

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DOMAIN_RE = re.compile(
    r"^(?=.{3,100}$)"
    r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
    r"(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)+$"
)


def _text(value: Any, label: str, required: bool) -> str:
    if value is None:
        if required:
            raise ValueError(f"{label} is required")
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{label} must be text")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"{label} must be valid text") from None
    return value.strip()


def optional_text(value: Any, label: str) -> str | None:
    """Trimmed text, or None when absent or blank."""
    return _text(value, label, required=False) or None


def _bounded_text(value: Any, label: str, minimum: int, maximum: int) -> str:
    text = _text(value, label, required=True)
    if not text:
        if isinstance(value, str) and value:
            raise ValueError(f"{label} cannot consist only of whitespace")
        raise ValueError(f"{label} is required")
    if len(text) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters")
    if len(text) > maximum:
        raise ValueError(f"{label} cannot exceed {maximum} characters")
    return text


def check_name(value: Any) -> str:
    return _bounded_text(value, "Business name", NAME_MIN, NAME_MAX)


def check_description(value: Any) -> str:
    return _bounded_text(value, "Description", DESCRIPTION_MIN, DESCRIPTION_MAX)


def check_email(value: Any) -> str:
    """Trim only; business email keeps its case."""
    email = _text(value, "Email", required=True)
    if not email:
        raise ValueError("Email is required")
    if not EMAIL_RE.match(email):
        raise ValueError("Please enter a valid email address")
    return email


def normalize_phone(value: str) -> str:
    """
    Clean a phone number to digits (keeping a leading "+") and map recognizable
    UK numbers to +44XXXXXXXXXX. Anything else is returned as the cleaned digits.
    """
    stripped = value.strip()
    digits = re.sub(r"[^0-9]", "", stripped)
    cleaned = f"+{digits}" if stripped.startswith("+") else digits
    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("0") and len(cleaned) > 1 and cleaned[1] != "0":
        return "+44" + cleaned[1:]
    if cleaned.startswith("44"):
        return "+" + cleaned
    if len(cleaned) == 10 and cleaned.startswith("7"):
        return "+44" + cleaned
    return cleaned


def check_phone(value: Any) -> str:
    phone = _text(value, "Phone number", required=False)
    if not phone:
        return ""
    compact = re.sub(r"[\s\-().]", "", phone)
    if not _PHONE_CHARS_RE.match(phone) or not _UK_PHONE_RE.match(compact):
        raise ValueError("Please enter a valid UK phone number")
    return normalize_phone(phone)


def normalize_website(value: str) -> str:
    """Reduce a URL or domain to the bare lowercase domain used for storage."""
    website = _SCHEME_RE.sub("", value.strip())
    website = website.removesuffix("/").lower()
    while website.startswith("www."):
        website = website[4:]
    return website


def check_website(value: Any) -> str:
    website = _text(value, "Website", required=False)
    if not website:
        return ""
    domain = normalize_website(website)
    if not _DOMAIN_RE.match(domain):
        raise ValueError("Please enter a valid website domain, e.g. example.co.uk")
    return domain


def _check_time(value: Any, label: str) -> str:
    text = _text(value, label, required=False)
    if text and not TIME_RE.match(text):
        raise ValueError(f"Please enter {label.lower()} in HH:MM format (24-hour)")
    return text


def check_opening_time(value: Any) -> str:
    return _check_time(value, "Opening time")


def check_closing_time(value: Any) -> str:
    return _check_time(value, "Closing time")


def parse_time(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


FIELD_RULES: dict[str, Callable[[Any], str]] = {
    "name": check_name,
    "description": check_description,
    "email": check_email,
    "phone": check_phone,
    "website": check_website,
    "openingTime": check_opening_time,
    "closingTime": check_closing_time,
}


def _raw_field():
    return Field(default=None, validate_default=True)


class BusinessSubmissionForm(BaseModel):
    """Parses an untyped record into a normalized submission, collecting every field error."""

    model_config = ConfigDict(extra="ignore")

    name: str = _raw_field()
    description: str = _raw_field()
    email: str = _raw_field()
    phone: str = _raw_field()
    website: str = _raw_field()
    openingTime: str = _raw_field()
    closingTime: str = _raw_field()

    @field_validator("*", mode="before")
    @classmethod
    def apply_field_rule(cls, value: Any, info) -> str:
        return FIELD_RULES[info.field_name](value)

    def schedule_warning(self) -> str | None:
        """Non-fatal: an opening time at or after the closing time may be an overnight schedule."""
        if not (self.openingTime and self.closingTime):
            return None
        if parse_time(self.openingTime) >= parse_time(self.closingTime):
            return "Opening time is not before closing time; please check the schedule"
        return None

    def to_submission(self) -> BusinessSubmission:
        return BusinessSubmission(**self.model_dump())
