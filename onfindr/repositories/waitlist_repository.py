import logging

from onfindr.db.connection import transaction
from onfindr.models.business import AlreadyExists, Created, WaitlistEntry, WaitlistResult
from onfindr.repositories.base import AbstractWaitlistRepository

logger = logging.getLogger(__name__)


class WaitlistRepository(AbstractWaitlistRepository):
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def insert_if_absent(self, entry: WaitlistEntry) -> WaitlistResult:
        """
        Insert keyed by email, relying on the UNIQUE constraint so concurrent
        duplicates cannot both insert. The existing row wins on conflict.
        """
        with transaction(self._db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO waitlist (id, email, name, phone, createdAt)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(email) DO NOTHING
                """,
                (entry.id, entry.email, entry.name, entry.phone, entry.createdAt),
            )
            if cursor.rowcount == 1:
                return Created(entry.id)
            row = conn.execute(
                "SELECT id FROM waitlist WHERE email = ?", (entry.email,)
            ).fetchone()
        return AlreadyExists(row["id"])

    def count(self) -> int:
        with transaction(self._db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM waitlist").fetchone()[0]
