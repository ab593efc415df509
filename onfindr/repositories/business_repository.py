import logging
import sqlite3

from onfindr.db.connection import transaction
from onfindr.models.business import (
    SUBMISSION_PENDING,
    SUBMISSION_PUBLISHED,
    BusinessRecord,
    SubmittedBusiness,
    utc_now,
)
from onfindr.repositories.base import AbstractBusinessRepository

logger = logging.getLogger(__name__)

_SUBMISSION_COLUMNS = (
    "id, name, description, email, phone, website, openingTime, closingTime, "
    "status, submittedAt, reviewedAt"
)
_BUSINESS_COLUMNS = (
    "id, name, slug, description, email, phone, website, openingTime, closingTime, "
    "status, submissionId, createdAt, updatedAt"
)


def _to_submission(row: sqlite3.Row) -> SubmittedBusiness:
    return SubmittedBusiness(**dict(row))


def _to_business(row: sqlite3.Row) -> BusinessRecord:
    return BusinessRecord(**dict(row))


class BusinessRepository(AbstractBusinessRepository):
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def insert_submission(self, submission: SubmittedBusiness) -> None:
        with transaction(self._db_path) as conn:
            conn.execute(
                f"""
                INSERT INTO submitted_businesses ({_SUBMISSION_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    submission.id,
                    submission.name,
                    submission.description,
                    submission.email,
                    submission.phone,
                    submission.website,
                    submission.openingTime,
                    submission.closingTime,
                    submission.status,
                    submission.submittedAt,
                    submission.reviewedAt,
                ),
            )

    def get_submission(self, submission_id: str) -> SubmittedBusiness | None:
        with transaction(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_SUBMISSION_COLUMNS} FROM submitted_businesses WHERE id = ?",
                (submission_id,),
            ).fetchone()
        return _to_submission(row) if row else None

    def list_submissions(self, status: str | None = None) -> list[SubmittedBusiness]:
        query = f"SELECT {_SUBMISSION_COLUMNS} FROM submitted_businesses"
        params: tuple = ()
        if status:
            query += " WHERE status = ?"
            params = (status,)
        query += " ORDER BY submittedAt DESC"
        with transaction(self._db_path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [_to_submission(row) for row in rows]

    def _insert_business(self, conn: sqlite3.Connection, record: BusinessRecord) -> None:
        conn.execute(
            f"""
            INSERT INTO businesses ({_BUSINESS_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.id,
                record.name,
                record.slug,
                record.description,
                record.email,
                record.phone,
                record.website,
                record.openingTime,
                record.closingTime,
                record.status,
                record.submissionId,
                record.createdAt,
                record.updatedAt,
            ),
        )

    def publish_submission(self, submission_id: str, record: BusinessRecord) -> bool:
        with transaction(self._db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE submitted_businesses
                SET status = ?, reviewedAt = ?
                WHERE id = ? AND status = ?
                """,
                (SUBMISSION_PUBLISHED, utc_now(), submission_id, SUBMISSION_PENDING),
            )
            if cursor.rowcount != 1:
                return False
            self._insert_business(conn, record)
        return True

    def set_submission_status(self, submission_id: str, status: str) -> bool:
        with transaction(self._db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE submitted_businesses
                SET status = ?, reviewedAt = ?
                WHERE id = ? AND status = ?
                """,
                (status, utc_now(), submission_id, SUBMISSION_PENDING),
            )
        return cursor.rowcount == 1

    def get_business(self, slug: str) -> BusinessRecord | None:
        with transaction(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_BUSINESS_COLUMNS} FROM businesses WHERE slug = ?", (slug,)
            ).fetchone()
        return _to_business(row) if row else None

    def list_businesses(self, status: str | None = None) -> list[BusinessRecord]:
        query = f"SELECT {_BUSINESS_COLUMNS} FROM businesses"
        params: tuple = ()
        if status:
            query += " WHERE status = ?"
            params = (status,)
        query += " ORDER BY name COLLATE NOCASE"
        with transaction(self._db_path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [_to_business(row) for row in rows]

    def update_business(self, slug: str, record: BusinessRecord) -> bool:
        with transaction(self._db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE businesses
                SET name = ?, slug = ?, description = ?, email = ?, phone = ?,
                    website = ?, openingTime = ?, closingTime = ?, status = ?,
                    updatedAt = ?
                WHERE slug = ?
                """,
                (
                    record.name,
                    record.slug,
                    record.description,
                    record.email,
                    record.phone,
                    record.website,
                    record.openingTime,
                    record.closingTime,
                    record.status,
                    record.updatedAt,
                    slug,
                ),
            )
        return cursor.rowcount == 1
