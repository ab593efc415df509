import logging
import re
import sqlite3
from dataclasses import replace

from onfindr.models.business import (
    LISTING_PUBLISHED,
    LISTING_STATUSES,
    SUBMISSION_PENDING,
    SUBMISSION_REJECTED,
    BusinessRecord,
    SubmittedBusiness,
    utc_now,
)
from onfindr.repositories.base import AbstractBusinessRepository
from onfindr.services.validation_service import ValidatedSubmission

logger = logging.getLogger(__name__)


class SubmissionNotFound(Exception):
    pass


class SubmissionAlreadyReviewed(Exception):
    pass


class BusinessNotFound(Exception):
    pass


class SlugConflict(Exception):
    pass


def slugify(name: str) -> str:
    """
    Lowercase and hyphenate a business name: "Joe's Cafe" -> "joe's-cafe".
    Idempotent, so an existing slug maps to itself.
    """
    return re.sub(r"\s+", "-", name.strip().lower())


class BusinessService:
    def __init__(self, repository: AbstractBusinessRepository) -> None:
        self._repository = repository

    def submit(self, validated: ValidatedSubmission) -> SubmittedBusiness:
        """Persist a validated submission for review. The id and timestamp are assigned here."""
        submission = SubmittedBusiness(**validated.submission.to_dict())
        self._repository.insert_submission(submission)
        logger.info(
            "[submit] stored | id=%s | name=%r | warning=%s",
            submission.id,
            submission.name,
            bool(validated.warning),
        )
        return submission

    def list_submissions(self, status: str | None = None) -> list[SubmittedBusiness]:
        return self._repository.list_submissions(status)

    def _pending_submission(self, submission_id: str) -> SubmittedBusiness:
        submission = self._repository.get_submission(submission_id)
        if submission is None:
            raise SubmissionNotFound(submission_id)
        if submission.status != SUBMISSION_PENDING:
            raise SubmissionAlreadyReviewed(f"{submission_id} is already {submission.status}")
        return submission

    def publish_submission(self, submission_id: str) -> BusinessRecord:
        """Create a published listing from a pending submission."""
        submission = self._pending_submission(submission_id)
        fields = {
            key: getattr(submission, key)
            for key in ("name", "description", "email", "phone", "website", "openingTime", "closingTime")
        }
        record = BusinessRecord(**fields, slug=slugify(submission.name), submissionId=submission.id)
        try:
            published = self._repository.publish_submission(submission_id, record)
        except sqlite3.IntegrityError as exc:
            raise SlugConflict(f"a listing with slug {record.slug!r} already exists") from exc
        if not published:
            raise SubmissionAlreadyReviewed(f"{submission_id} is no longer pending")
        logger.info("[admin] published | submission=%s | slug=%s", submission_id, record.slug)
        return record

    def reject_submission(self, submission_id: str) -> None:
        self._pending_submission(submission_id)
        if not self._repository.set_submission_status(submission_id, SUBMISSION_REJECTED):
            raise SubmissionAlreadyReviewed(f"{submission_id} is no longer pending")
        logger.info("[admin] rejected | submission=%s", submission_id)

    def list_businesses(self, status: str | None = None) -> list[BusinessRecord]:
        return self._repository.list_businesses(status)

    def list_published(self) -> list[BusinessRecord]:
        return self._repository.list_businesses(LISTING_PUBLISHED)

    def get_business(self, slug_or_name: str) -> BusinessRecord:
        """Look up by slug; a raw business name resolves to the same slug."""
        record = self._repository.get_business(slugify(slug_or_name))
        if record is None:
            raise BusinessNotFound(slug_or_name)
        return record

    def _save(self, slug: str, record: BusinessRecord) -> BusinessRecord:
        try:
            updated = self._repository.update_business(slug, record)
        except sqlite3.IntegrityError as exc:
            raise SlugConflict(f"a listing with slug {record.slug!r} already exists") from exc
        if not updated:
            raise BusinessNotFound(slug)
        return record

    def edit_business(self, slug_or_name: str, validated: ValidatedSubmission) -> BusinessRecord:
        """Overwrite a listing's fields; the slug follows the new name. Last write wins."""
        current = self.get_business(slug_or_name)
        submission = validated.submission
        record = replace(
            current,
            **submission.to_dict(),
            slug=slugify(submission.name),
            updatedAt=utc_now(),
        )
        self._save(current.slug, record)
        logger.info("[admin] edited | slug=%s -> %s", current.slug, record.slug)
        return record

    def set_business_status(self, slug_or_name: str, status: str) -> BusinessRecord:
        if status not in LISTING_STATUSES:
            raise ValueError(f"status must be one of {sorted(LISTING_STATUSES)}")
        current = self.get_business(slug_or_name)
        record = replace(current, status=status, updatedAt=utc_now())
        self._save(current.slug, record)
        logger.info("[admin] status | slug=%s | status=%s", record.slug, status)
        return record
