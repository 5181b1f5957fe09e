"""HTTP routes for planning and applying landing zone deployments."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from landing_zone.application.services import LandingZoneService
from landing_zone.dependencies import (
    get_deployment_planner,
    get_descriptor_defaults,
    get_landing_zone_service,
)
from landing_zone.domain.aggregates import DeploymentDescriptor
from landing_zone.domain.exceptions import DeploymentDescriptorError, ProvisioningError
from landing_zone.domain.plan import DeploymentPlanner
from landing_zone.infrastructure.descriptor_loader import (
    DeploymentDescriptorDocument,
    DescriptorDefaults,
)
from landing_zone.ports.exceptions import (
    OrganizationApiUnavailableError,
    ParameterNotFoundError,
    ParameterResolutionTimeoutError,
)
from landing_zone.presentation.models import DeploymentResponse, PlanResponse

router = APIRouter(
    prefix="/landing-zone",
    tags=["landing-zone"],
)


def _to_descriptor(
    document: DeploymentDescriptorDocument, defaults: DescriptorDefaults
) -> DeploymentDescriptor:
    try:
        return document.to_domain(defaults)
    except DeploymentDescriptorError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.problems,
        )


@router.post(
    "/plan",
    summary="Plan a deployment",
    description="Validate a descriptor and return its ordered request graph "
    "without contacting AWS",
    responses={
        200: {"description": "Plan built successfully"},
        422: {"description": "Descriptor failed validation"},
    },
)
async def plan_deployment(
    request: DeploymentDescriptorDocument,
    planner: Annotated[DeploymentPlanner, Depends(get_deployment_planner)],
    defaults: Annotated[DescriptorDefaults, Depends(get_descriptor_defaults)],
) -> PlanResponse:
    """Build the provisioning plan of a descriptor (dry run)."""
    descriptor = _to_descriptor(request, defaults)
    try:
        plan = planner.build(descriptor)
    except DeploymentDescriptorError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.problems,
        )
    return PlanResponse.from_domain(plan)


@router.post(
    "/deployments",
    summary="Apply a deployment",
    responses={
        200: {"description": "Run finished; see per-team outcomes"},
        422: {"description": "Descriptor failed validation"},
        424: {"description": "A required parameter could not be resolved"},
        503: {"description": "An AWS API was unavailable"},
    },
)
async def create_deployment(
    request: DeploymentDescriptorDocument,
    service: Annotated[LandingZoneService, Depends(get_landing_zone_service)],
    defaults: Annotated[DescriptorDefaults, Depends(get_descriptor_defaults)],
) -> DeploymentResponse:
    """Apply a descriptor against AWS.

    Team failures do not fail the request: the response carries
    succeeded=false and the per-team errors. Only failures that stop the
    whole run map to error status codes.

    Raises:
        HTTPException: 422 if the descriptor is invalid
        HTTPException: 424 if a parameter is missing
        HTTPException: 503 if an AWS API is unavailable
        HTTPException: 500 for other provisioning errors
    """
    descriptor = _to_descriptor(request, defaults)
    try:
        report = await service.deploy(descriptor)
    except DeploymentDescriptorError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.problems,
        )
    except (ParameterNotFoundError, ParameterResolutionTimeoutError) as e:
        raise HTTPException(
            status_code=status.HTTP_424_FAILED_DEPENDENCY,
            detail=str(e),
        )
    except OrganizationApiUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    except ProvisioningError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return DeploymentResponse.from_domain(report)
