import logging

from onfindr.models.business import Created, WaitlistEntry, WaitlistResult
from onfindr.repositories.base import AbstractWaitlistRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class WaitlistService:
    def __init__(self, repository: AbstractWaitlistRepository) -> None:
        self._repository = repository

    def add_to_waitlist(
        self, email: str, name: str | None = None, phone: str | None = None
    ) -> WaitlistResult:
        """
        Add an email to the waitlist, idempotent per normalized email.
        A repeat returns AlreadyExists with the original id; the first
        submission's name and phone are kept.
        """
        entry = WaitlistEntry(email=normalize_email(email), name=name, phone=phone)
        result = self._repository.insert_if_absent(entry)
        logger.info(
            "[waitlist] %s | id=%s",
            "created" if isinstance(result, Created) else "already exists",
            result.id,
        )
        return result
