"""Meeting API routes: agenda, reveal and decisions."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from grantflow.api.auth.member_auth import get_current_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.common import ProblemDetailResponse
from grantflow.api.models.meeting import DecisionRequest, RevealRequest
from grantflow.api.models.proposal import ProposalListResponse, ProposalViewResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member

router = APIRouter(prefix="/v1/meeting", tags=["meeting"])

_MUTATION_RESPONSES = {
    400: {"model": ProblemDetailResponse, "description": "Invalid transition"},
    403: {"model": ProblemDetailResponse, "description": "Role not permitted"},
    404: {"model": ProblemDetailResponse, "description": "Proposal not found"},
    409: {"model": ProblemDetailResponse, "description": "Already decided or changed"},
}


@router.get("", response_model=ProposalListResponse)
async def get_meeting_agenda(
    request: Request,
    year: int | None = Query(default=None, description="Budget year; latest when omitted"),
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalListResponse:
    """Proposals still under review (oversight and manager)."""
    try:
        resolved_year, views = await controller.get_meeting_proposals(member, year)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalListResponse.from_domain(resolved_year, views)


@router.post(
    "/{proposal_id}/reveal",
    response_model=ProposalViewResponse,
    responses=_MUTATION_RESPONSES,
)
async def reveal_proposal(
    proposal_id: UUID,
    request_data: RevealRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalViewResponse:
    try:
        view = await controller.reveal_proposal(member, proposal_id, request_data.reveal)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalViewResponse.from_domain(view)


@router.post(
    "/{proposal_id}/decision",
    response_model=ProposalViewResponse,
    responses=_MUTATION_RESPONSES,
)
async def record_decision(
    proposal_id: UUID,
    request_data: DecisionRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalViewResponse:
    """Approve, decline or mark a proposal as sent."""
    try:
        view = await controller.record_meeting_decision(
            member, proposal_id, request_data.status, sent_at=request_data.sent_at
        )
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalViewResponse.from_domain(view)
