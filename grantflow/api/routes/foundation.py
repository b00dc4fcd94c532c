"""Foundation snapshot API route."""

from fastapi import APIRouter, Depends, Query, Request

from grantflow.api.auth.member_auth import get_optional_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.common import ProblemDetailResponse
from grantflow.api.models.snapshot import FoundationSnapshotResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member

router = APIRouter(prefix="/v1/foundation", tags=["snapshots"])


@router.get(
    "",
    response_model=FoundationSnapshotResponse,
    responses={404: {"model": ProblemDetailResponse, "description": "No budget"}},
)
async def get_foundation_snapshot(
    request: Request,
    year: int | None = Query(default=None, description="Budget year; latest when omitted"),
    member: Member | None = Depends(get_optional_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> FoundationSnapshotResponse:
    try:
        snapshot = await controller.get_foundation_snapshot(member, year)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return FoundationSnapshotResponse.from_dto(snapshot)
