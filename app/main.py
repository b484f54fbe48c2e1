from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from app import deps
from app.errors import DuplicateKeyError, NotFoundError, OptimisticLockError, UserStoreError, ValidationError
from app.logging_config import configure_logging
from app.routers.users import router as users_router
from app.settings import Settings, get_settings
from app.user_store import InMemoryUserStore

configure_logging(get_settings().log_level)

logger = logging.getLogger("user_record_store")

APP_VERSION = "1.0.0"

app = FastAPI(title="User Record Store", version=APP_VERSION)
app.include_router(users_router)

_STATUS_BY_ERROR: dict[type[UserStoreError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    DuplicateKeyError: 409,
    OptimisticLockError: 409,
}


@app.exception_handler(UserStoreError)
async def user_store_error_handler(request: Request, exc: UserStoreError) -> JSONResponse:
    status_code = _STATUS_BY_ERROR.get(type(exc), 500)
    if status_code == 409:
        logger.warning("Write rejected on %s %s: %s", request.method, request.url.path, exc)
    elif status_code == 500:
        logger.error("Unhandled store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": exc.code, "detail": exc.message}, status_code=status_code)


@app.get("/healthz")
def healthz(
    settings: Settings = Depends(deps.get_settings_dep),
    store: InMemoryUserStore = Depends(deps.get_user_store),
):
    return JSONResponse(
        {
            "ok": True,
            "service": settings.app_name,
            "version": APP_VERSION,
            "records": store.count(),
        }
    )


@app.get("/configz")
def configz(settings: Settings = Depends(deps.get_settings_dep)):
    # Nothing secret lives in Settings today; keep this list explicit anyway.
    return JSONResponse(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "api_base_url": settings.api_base_url,
            "api_timeout_seconds": settings.api_timeout_seconds,
        }
    )
