from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.middleware.sessions import SessionMiddleware

from assetshare.api.v1 import categories, inventories, lookups, maintenance_plans, profiles, reports
from assetshare.core.config import settings
from assetshare.core.errors import DependencyError, StatusNotFoundError, ValidationError

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

settings.validate_runtime()


def run_migrations() -> None:
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, "head")
    logger.info("database migrations completed")


if settings.run_migrations:
    run_migrations()


app = FastAPI(title="Asset Share")
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    same_site="lax",
    https_only=settings.session_cookie_secure,
)

app.include_router(inventories.router, prefix="/api/v1")
app.include_router(categories.router, prefix="/api/v1")
app.include_router(maintenance_plans.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(profiles.router, prefix="/api/v1")
app.include_router(lookups.router, prefix="/api/v1")


@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(StatusNotFoundError)
async def handle_status_not_found(request: Request, exc: StatusNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NoResultFound)
async def handle_no_result(request: Request, exc: NoResultFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"})


@app.exception_handler(IntegrityError)
async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("constraint violation on %s: %s", request.url.path, exc.orig)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": "Conflicts with existing data"})


@app.exception_handler(DependencyError)
async def handle_dependency_error(request: Request, exc: DependencyError) -> JSONResponse:
    logger.error("dependency failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": "Upstream dependency failed"})


@app.on_event("startup")
def seed_reference_data() -> None:
    from assetshare.db.seed import seed

    seed()


@app.get("/healthz")
def health_check():
    return {"status": "ok"}
