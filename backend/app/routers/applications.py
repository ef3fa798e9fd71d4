"""
Application (API client) management endpoints. Administrators only.
"""

from fastapi import APIRouter, Depends, status

from leaderboard.logging import get_logger
from leaderboard.models import Application
from leaderboard.repositories import ApplicationRepository

from ..auth.dependencies import require_admin
from ..dependencies import get_application_repository
from ..schemas import (
    ApplicationCreatedResponse,
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationUpdateRequest,
)

logger = get_logger("applications")

router = APIRouter(
    prefix="/applications",
    tags=["applications"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=ApplicationCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreateRequest,
    repo: ApplicationRepository = Depends(get_application_repository),
):
    """Register an application. The secret is only returned here."""
    application, secret = repo.create_application(payload.name, admin=payload.admin)
    logger.info("application_created", key=application.key, admin=application.admin)
    return ApplicationCreatedResponse(
        **ApplicationResponse.model_validate(application).model_dump(),
        secret=secret,
    )


@router.get("", response_model=list[ApplicationResponse])
def list_applications(repo: ApplicationRepository = Depends(get_application_repository)):
    return repo.get_all()


@router.get("/{key}", response_model=ApplicationResponse)
def get_application(key: str, repo: ApplicationRepository = Depends(get_application_repository)):
    return repo.get_or_raise(key)


@router.patch("/{key}", response_model=ApplicationResponse)
def update_application(
    key: str,
    payload: ApplicationUpdateRequest,
    repo: ApplicationRepository = Depends(get_application_repository),
):
    return repo.update(key, name=payload.name, admin=payload.admin)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    key: str,
    repo: ApplicationRepository = Depends(get_application_repository),
    current: Application = Depends(require_admin),
):
    repo.delete(key)
    logger.info("application_deleted", key=key, deleted_by=current.key)
