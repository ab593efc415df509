from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

SUBMISSION_PENDING = "pending_review"
SUBMISSION_PUBLISHED = "published"
SUBMISSION_REJECTED = "rejected"

LISTING_PUBLISHED = "published"
LISTING_HIDDEN = "hidden"
LISTING_STATUSES = {LISTING_PUBLISHED, LISTING_HIDDEN}


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class BusinessSubmission:
    """A normalized listing as accepted by the validator. Optional fields are "" when absent."""

    name: str
    description: str
    email: str
    phone: str = ""
    website: str = ""
    openingTime: str = ""
    closingTime: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SubmittedBusiness(BusinessSubmission):
    id: str = field(default_factory=lambda: new_id("business"))
    status: str = SUBMISSION_PENDING
    submittedAt: str = field(default_factory=utc_now)
    reviewedAt: str | None = None


@dataclass
class BusinessRecord(BusinessSubmission):
    slug: str = ""
    id: str = field(default_factory=lambda: new_id("listing"))
    status: str = LISTING_PUBLISHED
    submissionId: str | None = None
    createdAt: str = field(default_factory=utc_now)
    updatedAt: str = field(default_factory=utc_now)


@dataclass
class WaitlistEntry:
    email: str
    name: str | None = None
    phone: str | None = None
    id: str = field(default_factory=lambda: new_id("waitlist"))
    createdAt: str = field(default_factory=utc_now)


@dataclass(frozen=True)
class Created:
    id: str


@dataclass(frozen=True)
class AlreadyExists:
    id: str


WaitlistResult = Created | AlreadyExists
