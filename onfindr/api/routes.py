import asyncio
import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from onfindr.models.business import Created
from onfindr.schemas.waitlist import WaitlistRequest, WaitlistResponse
from onfindr.services.validation_service import SubmissionRejected

logger = logging.getLogger(__name__)

router = APIRouter()


def rejection_response(exc: SubmissionRejected) -> JSONResponse:
    content = {"success": False, "message": exc.message, "errors": exc.errors}
    if exc.debug is not None:
        content["debug"] = exc.debug
    return JSONResponse(status_code=400, content=content)


async def read_json(request: Request):
    """Parse the request body as JSON. Returns a 400 response instead if it cannot be parsed."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.info("[submit] unparseable body | error=%s", exc)
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Invalid JSON format.",
                "errors": {"request": "Could not parse request data"},
            },
        )


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/submit-business", status_code=201)
async def submit_business(request: Request) -> JSONResponse:
    body = await read_json(request)
    if isinstance(body, JSONResponse):
        return body

    validator = request.app.state.validator
    business_service = request.app.state.business_service

    try:
        validated = validator.validate(body)
    except SubmissionRejected as exc:
        logger.info("[submit] rejected | errors=%s", exc.errors)
        return rejection_response(exc)

    stored = await asyncio.to_thread(business_service.submit, validated)

    data = stored.to_dict()
    if validated.warning:
        data["timeWarning"] = validated.warning
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": f"Thank you, {stored.name}! Your business has been submitted for review.",
            "data": data,
        },
        headers={"Cache-Control": "no-store"},
    )


@router.post("/waitlist", response_model=WaitlistResponse)
async def join_waitlist(payload: WaitlistRequest, request: Request) -> JSONResponse:
    waitlist_service = request.app.state.waitlist_service
    result = await asyncio.to_thread(
        waitlist_service.add_to_waitlist, payload.email, payload.name, payload.phone
    )
    created = isinstance(result, Created)
    return JSONResponse(
        status_code=201 if created else 200,
        content=WaitlistResponse(id=result.id, created=created).model_dump(),
    )


@router.get("/businesses")
async def list_directory(request: Request) -> dict:
    business_service = request.app.state.business_service
    records = await asyncio.to_thread(business_service.list_published)
    return {"success": True, "data": [record.to_dict() for record in records]}
