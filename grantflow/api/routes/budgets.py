"""Budget API routes."""

from fastapi import APIRouter, Depends, Request

from grantflow.api.auth.member_auth import get_current_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.budget import BudgetResponse, UpsertBudgetRequest
from grantflow.api.models.common import ProblemDetailResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member
from grantflow.domain.services.allocation import compute_pools

router = APIRouter(prefix="/v1/budgets", tags=["budgets"])


@router.get(
    "/{year}",
    response_model=BudgetResponse,
    responses={404: {"model": ProblemDetailResponse, "description": "No budget"}},
)
async def get_budget(
    year: int,
    request: Request,
    _member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> BudgetResponse:
    """Return a year's budget and its pools."""
    try:
        budget = await controller.get_budget(year)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return BudgetResponse.from_domain(budget, compute_pools(budget))


@router.put(
    "/{year}",
    response_model=BudgetResponse,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid amounts or ratios"},
        403: {"model": ProblemDetailResponse, "description": "Not a budget editor"},
    },
)
async def upsert_budget(
    year: int,
    request_data: UpsertBudgetRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> BudgetResponse:
    """Create or replace a year's budget (oversight and manager)."""
    try:
        budget = await controller.upsert_budget(
            member,
            year,
            request_data.total_amount,
            rollover_from_previous_year=request_data.rollover_from_previous_year,
            joint_ratio=request_data.joint_ratio,
            discretionary_ratio=request_data.discretionary_ratio,
            meeting_reveal_enabled=request_data.meeting_reveal_enabled,
        )
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return BudgetResponse.from_domain(budget, compute_pools(budget))

