from abc import ABC, abstractmethod

from onfindr.models.business import BusinessRecord, SubmittedBusiness, WaitlistEntry, WaitlistResult


class AbstractBusinessRepository(ABC):
    @abstractmethod
    def insert_submission(self, submission: SubmittedBusiness) -> None:
        """Store a new pending submission."""

    @abstractmethod
    def get_submission(self, submission_id: str) -> SubmittedBusiness | None:
        """Return the submission with the given id, or None."""

    @abstractmethod
    def list_submissions(self, status: str | None = None) -> list[SubmittedBusiness]:
        """Return submissions, newest first, optionally filtered by status."""

    @abstractmethod
    def publish_submission(self, submission_id: str, record: BusinessRecord) -> bool:
        """
        Insert the listing and mark the submission published in one transaction.
        Returns False if the submission was no longer pending. Raises
        sqlite3.IntegrityError if the slug is taken.
        """

    @abstractmethod
    def set_submission_status(self, submission_id: str, status: str) -> bool:
        """Move a pending submission to status. Returns False if it was not pending."""

    @abstractmethod
    def get_business(self, slug: str) -> BusinessRecord | None:
        """Return the listing with the given slug, or None."""

    @abstractmethod
    def list_businesses(self, status: str | None = None) -> list[BusinessRecord]:
        """Return listings ordered by name, optionally filtered by status."""

    @abstractmethod
    def update_business(self, slug: str, record: BusinessRecord) -> bool:
        """Overwrite the listing currently at slug (last write wins). Returns False if missing."""


class AbstractWaitlistRepository(ABC):
    @abstractmethod
    def insert_if_absent(self, entry: WaitlistEntry) -> WaitlistResult:
        """Insert entry unless its email already exists; atomic at the store level."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of waitlist entries."""
