import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from onfindr.models.business import BusinessSubmission
from onfindr.schemas.business import FIELD_RULES, BusinessSubmissionForm

logger = logging.getLogger(__name__)


class SubmissionRejected(Exception):
    """Base for user-facing rejections. Carries a field -> message map."""

    def __init__(self, message: str, errors: dict[str, str], debug: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.debug = debug


class MalformedRequest(SubmissionRejected):
    pass


class ValidationFailed(SubmissionRejected):
    pass


@dataclass(frozen=True)
class ValidatorConfig:
    include_debug_detail: bool = False


@dataclass
class ValidatedSubmission:
    submission: BusinessSubmission
    warning: str | None = None


class SubmissionValidator:
    """Stateless: safe to share across requests and threads."""

    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self._config = config or ValidatorConfig()

    def validate(self, raw: Any) -> ValidatedSubmission:
        """
        Validate and normalize an untyped record.
        Raises MalformedRequest if raw is not a record, ValidationFailed with
        every failing field otherwise. Returns the normalized submission and
        an optional non-fatal schedule warning.
        """
        if not isinstance(raw, Mapping):
            debug = [{"received": type(raw).__name__}] if self._config.include_debug_detail else None
            raise MalformedRequest(
                "Invalid request format.", {"body": "Expected JSON object"}, debug=debug
            )

        try:
            form = BusinessSubmissionForm.model_validate(dict(raw))
        except ValidationError as exc:
            errors, debug = self._collect(exc, raw)
            logger.debug("[validate] rejected | fields=%s", sorted(errors))
            raise ValidationFailed("Validation failed. Please correct:", errors, debug=debug)

        return ValidatedSubmission(submission=form.to_submission(), warning=form.schedule_warning())

    def _collect(self, exc: ValidationError, raw: Mapping) -> tuple[dict[str, str], list[dict] | None]:
        errors: dict[str, str] = {}
        debug: list[dict] = []
        for error in exc.errors(include_url=False):
            field = str(error["loc"][0]) if error["loc"] else "body"
            cause = error.get("ctx", {}).get("error")
            errors.setdefault(field, str(cause) if cause is not None else error["msg"])
            debug.append(
                {
                    "field": field,
                    "type": error["type"],
                    "received": type(raw.get(field)).__name__,
                }
            )
        return errors, (debug if self._config.include_debug_detail else None)


def validate_field(field: str, value: Any) -> str | None:
    """Live feedback for a single form field: the error message, or None if acceptable."""
    rule = FIELD_RULES.get(field)
    if rule is None:
        raise KeyError(f"unknown field: {field}")
    try:
        rule(value)
    except ValueError as exc:
        return str(exc)
    return None
