"""Proposal and vote API routes."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from grantflow.api.auth.member_auth import get_current_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.common import ProblemDetailResponse
from grantflow.api.models.proposal import (
    ProposalViewResponse,
    SubmitProposalRequest,
    UpdateProposalRequest,
)
from grantflow.api.models.vote import CastVoteRequest, VoteAcceptedResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member

router = APIRouter(prefix="/v1/proposals", tags=["proposals"])


@router.post(
    "",
    response_model=ProposalViewResponse,
    status_code=201,
    responses={
        400: {
            "model": ProblemDetailResponse,
            "description": "Invalid proposal or discretionary cap exceeded",
        },
        403: {"model": ProblemDetailResponse, "description": "Role not permitted"},
        404: {"model": ProblemDetailResponse, "description": "No budget for the year"},
    },
    summary="Submit a grant proposal",
)
async def submit_proposal(
    request_data: SubmitProposalRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalViewResponse:
    try:
        view = await controller.submit_proposal(member, request_data.to_submission())
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalViewResponse.from_domain(view)


@router.patch(
    "/{proposal_id}",
    response_model=ProposalViewResponse,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid patch"},
        403: {"model": ProblemDetailResponse, "description": "Not allowed to edit"},
        404: {"model": ProblemDetailResponse, "description": "Proposal not found"},
        409: {"model": ProblemDetailResponse, "description": "Concurrent change"},
    },
    summary="Edit a proposal record",
)
async def update_proposal(
    proposal_id: UUID,
    request_data: UpdateProposalRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> ProposalViewResponse:
    """Apply the fields present in the body.

    Final amount corrections are limited to proposals from years before
    the current calendar year (UTC).
    """
    current_year = datetime.now(timezone.utc).year
    try:
        view = await controller.update_proposal(
            member, proposal_id, request_data.to_patch(), current_year
        )
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return ProposalViewResponse.from_domain(view)


@router.post(
    "/{proposal_id}/votes",
    response_model=VoteAcceptedResponse,
    status_code=201,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid ballot"},
        403: {"model": ProblemDetailResponse, "description": "Not allowed to vote"},
        404: {"model": ProblemDetailResponse, "description": "Proposal not found"},
        409: {"model": ProblemDetailResponse, "description": "Already voted or closed"},
    },
    summary="Cast a vote",
)
async def cast_vote(
    proposal_id: UUID,
    request_data: CastVoteRequest,
    request: Request,
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> VoteAcceptedResponse:
    try:
        await controller.cast_vote(
            member,
            proposal_id,
            request_data.choice,
            allocation_amount=request_data.allocation_amount,
            flag_comment=request_data.flag_comment,
        )
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return VoteAcceptedResponse(ok=True)
