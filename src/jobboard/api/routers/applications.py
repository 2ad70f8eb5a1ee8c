"""API router for job applications."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.jobboard.api.dependencies import (
    get_application_list_query,
    get_application_service,
)
from src.jobboard.domain.application import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationSummary,
    ApplicationUpdate,
)
from src.jobboard.domain.envelope import (
    DeletedResource,
    ListPayload,
    SuccessEnvelope,
    list_response,
    success_response,
)
from src.jobboard.domain.pagination import ListQuery
from src.jobboard.services.application_service import ApplicationService

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=SuccessEnvelope[ListPayload[ApplicationSummary]])
async def list_applications(
    service: Annotated[ApplicationService, Depends(get_application_service)],
    query: Annotated[ListQuery, Depends(get_application_list_query)],
) -> SuccessEnvelope:
    """List applications newest first.

    Filters: ``status``, ``jobId``, ``candidateId``.
    """
    result = await service.list_applications(query)
    return list_response(result, message="Applications fetched successfully")


@router.post(
    "",
    response_model=SuccessEnvelope[ApplicationDetail],
    status_code=status.HTTP_201_CREATED,
)
async def create_application(
    service: Annotated[ApplicationService, Depends(get_application_service)],
    data: ApplicationCreate,
) -> SuccessEnvelope:
    """Apply to a job.

    Returns 400 if the job or candidate does not exist and 409 if the
    candidate has already applied.
    """
    application = await service.apply(data)
    return success_response(application, message="Application submitted successfully")


@router.get("/{application_id}", response_model=SuccessEnvelope[ApplicationDetail])
async def get_application(
    service: Annotated[ApplicationService, Depends(get_application_service)],
    application_id: str,
) -> SuccessEnvelope:
    """Get an application with its job and candidate."""
    application = await service.get(application_id)
    return success_response(application, message="Application fetched successfully")


@router.patch("/{application_id}", response_model=SuccessEnvelope[ApplicationDetail])
async def update_application_status(
    service: Annotated[ApplicationService, Depends(get_application_service)],
    application_id: str,
    data: ApplicationUpdate,
) -> SuccessEnvelope:
    """Move an application to a new status."""
    application = await service.update_status(application_id, data)
    return success_response(application, message="Application updated successfully")


@router.delete("/{application_id}", response_model=SuccessEnvelope[DeletedResource])
async def delete_application(
    service: Annotated[ApplicationService, Depends(get_application_service)],
    application_id: str,
) -> SuccessEnvelope:
    """Withdraw (delete) an application."""
    await service.withdraw(application_id)
    return success_response(
        DeletedResource(id=application_id),
        message="Application deleted successfully",
    )
