"""
Health and diagnostics router.

Liveness, deployed version and database connectivity.
No business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chartcoach.application.coaching.check_database import CheckDatabaseUseCase
from chartcoach.core.config import settings
from chartcoach.interfaces.coaching.dependencies import get_check_database_use_case
from chartcoach.interfaces.coaching.schemas import (
    DatabaseStatusResponse,
    HealthResponse,
    VersionResponse,
)

router = APIRouter(tags=["health"])

SHORT_SHA_LENGTH = 7


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)


@router.get(
    "/version",
    response_model=VersionResponse,
    summary="Deployed version",
    description="Version string derived from the deployed commit.",
)
def version() -> VersionResponse:
    """Return the deployed commit, branch and a commit-derived version."""
    sha = (settings.vercel_git_commit_sha or "dev")[:SHORT_SHA_LENGTH]
    return VersionResponse(
        version=f"v1.0.{sha}",
        sha=sha,
        branch=settings.vercel_git_commit_ref or "local",
        built_at=datetime.now(timezone.utc).isoformat(),
    )


@router.get(
    "/db-test",
    response_model=DatabaseStatusResponse,
    response_model_exclude_none=True,
    responses={500: {"model": DatabaseStatusResponse}},
    summary="Database connectivity test",
)
def db_test(
    use_case: CheckDatabaseUseCase = Depends(get_check_database_use_case),
):
    """Run a trivial query against the configured database."""
    status = use_case.execute()
    body = DatabaseStatusResponse(
        ok=status.ok,
        has_db=status.has_db,
        now=status.now,
        message=status.message,
        error=status.error,
    )
    if status.has_db and not status.ok:
        return JSONResponse(
            status_code=500,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )
    return body
