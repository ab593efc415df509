import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from onfindr.api.routes import read_json, rejection_response
from onfindr.services.business_service import (
    BusinessNotFound,
    SlugConflict,
    SubmissionAlreadyReviewed,
    SubmissionNotFound,
)
from onfindr.services.validation_service import SubmissionRejected

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


class StatusUpdate(BaseModel):
    status: str


def _raise_http(exc: Exception):
    if isinstance(exc, (SubmissionNotFound, BusinessNotFound)):
        raise HTTPException(status_code=404, detail=f"Not found: {exc}") from exc
    if isinstance(exc, (SlugConflict, SubmissionAlreadyReviewed)):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    raise exc


@router.get("/submissions")
async def list_submissions(request: Request, status: str | None = None) -> dict:
    service = request.app.state.business_service
    submissions = await asyncio.to_thread(service.list_submissions, status)
    return {"success": True, "data": [s.to_dict() for s in submissions]}


@router.post("/submissions/{submission_id}/publish", status_code=201)
async def publish_submission(submission_id: str, request: Request) -> dict:
    service = request.app.state.business_service
    try:
        record = await asyncio.to_thread(service.publish_submission, submission_id)
    except (SubmissionNotFound, SubmissionAlreadyReviewed, SlugConflict) as exc:
        logger.info("[admin] publish refused | submission=%s | reason=%s", submission_id, exc)
        _raise_http(exc)
    return {"success": True, "message": "Business published", "data": record.to_dict()}


@router.post("/submissions/{submission_id}/reject")
async def reject_submission(submission_id: str, request: Request) -> dict:
    service = request.app.state.business_service
    try:
        await asyncio.to_thread(service.reject_submission, submission_id)
    except (SubmissionNotFound, SubmissionAlreadyReviewed) as exc:
        _raise_http(exc)
    return {"success": True, "message": "Submission rejected"}


@router.get("/businesses")
async def list_businesses(request: Request, status: str | None = None) -> dict:
    service = request.app.state.business_service
    records = await asyncio.to_thread(service.list_businesses, status)
    return {"success": True, "data": [r.to_dict() for r in records]}


@router.get("/businesses/{slug}")
async def get_business(slug: str, request: Request) -> dict:
    service = request.app.state.business_service
    try:
        record = await asyncio.to_thread(service.get_business, slug)
    except BusinessNotFound as exc:
        _raise_http(exc)
    return {"success": True, "data": record.to_dict()}


@router.put("/businesses/{slug}")
async def edit_business(slug: str, request: Request):
    body = await read_json(request)
    if isinstance(body, JSONResponse):
        return body

    try:
        validated = request.app.state.validator.validate(body)
    except SubmissionRejected as exc:
        logger.info("[admin] edit rejected | slug=%s | errors=%s", slug, exc.errors)
        return rejection_response(exc)

    service = request.app.state.business_service
    try:
        record = await asyncio.to_thread(service.edit_business, slug, validated)
    except (BusinessNotFound, SlugConflict) as exc:
        _raise_http(exc)

    data = record.to_dict()
    if validated.warning:
        data["timeWarning"] = validated.warning
    return {"success": True, "message": "Business edited successfully", "data": data}


@router.post("/businesses/{slug}/status")
async def set_business_status(slug: str, payload: StatusUpdate, request: Request) -> dict:
    service = request.app.state.business_service
    try:
        record = await asyncio.to_thread(service.set_business_status, slug, payload.status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (BusinessNotFound, SlugConflict) as exc:
        _raise_http(exc)
    return {"success": True, "data": record.to_dict()}
