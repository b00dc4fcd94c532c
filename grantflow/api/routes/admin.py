"""Admin queue API route."""

from fastapi import APIRouter, Depends, Query, Request

from grantflow.api.auth.member_auth import get_current_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.proposal import ProposalListResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.get("/queue", response_model=ProposalListResponse)
async def get_admin_queue(
    request: Request,
    year: int | None = Query(default=None),
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalListResponse:
    """Approved proposals waiting to be paid."""
    try:
        resolved_year, views = await controller.get_admin_queue(member, year)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalListResponse.from_domain(resolved_year, views)
