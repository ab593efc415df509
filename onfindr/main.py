import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from onfindr.api.admin_routes import router as admin_router
from onfindr.api.routes import router
from onfindr.config import settings
from onfindr.db.connection import run_migrations
from onfindr.repositories.business_repository import BusinessRepository
from onfindr.repositories.waitlist_repository import WaitlistRepository
from onfindr.services.business_service import BusinessService
from onfindr.services.validation_service import SubmissionValidator, ValidatorConfig
from onfindr.services.waitlist_service import WaitlistService


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("onfindr starting | db=%s | port=%s", settings.DB_PATH, settings.PORT)
    run_migrations(settings.DB_PATH)
    app.state.include_debug_detail = settings.INCLUDE_DEBUG_DETAIL
    app.state.validator = SubmissionValidator(
        ValidatorConfig(include_debug_detail=settings.INCLUDE_DEBUG_DETAIL)
    )
    app.state.business_service = BusinessService(BusinessRepository(settings.DB_PATH))
    app.state.waitlist_service = WaitlistService(WaitlistRepository(settings.DB_PATH))
    yield
    logger.info("onfindr shutting down")


def _field_of(loc: tuple) -> str:
    # ("body", "email") -> "email"; a whole-body error has loc ("body",)
    return str(loc[-1]) if len(loc) > 1 else "body"


def create_app() -> FastAPI:
    app = FastAPI(title="onfindr", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.include_router(admin_router)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        if any(error["type"] == "json_invalid" for error in exc.errors()):
            return JSONResponse(
                status_code=400,
                content={
                    "success": False,
                    "message": "Invalid JSON format.",
                    "errors": {"request": "Could not parse request data"},
                },
            )
        errors: dict[str, str] = {}
        for error in exc.errors():
            cause = error.get("ctx", {}).get("error")
            errors.setdefault(_field_of(error["loc"]), str(cause) if cause is not None else error["msg"])
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid request.", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger(__name__).exception("Unhandled exception | path=%s", request.url.path)
        content = {"success": False, "message": "Server error. Please try again."}
        if getattr(request.app.state, "include_debug_detail", False):
            content["debug"] = repr(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("onfindr.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL)
