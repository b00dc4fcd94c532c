"""Workspace snapshot API route."""

from fastapi import APIRouter, Depends, Query, Request

from grantflow.api.auth.member_auth import get_current_member
from grantflow.api.dependencies.foundation import get_lifecycle_controller
from grantflow.api.errors import problem_exception
from grantflow.api.models.snapshot import WorkspaceSnapshotResponse
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.domain.exceptions import GrantflowError
from grantflow.domain.models.member import Member

router = APIRouter(prefix="/v1/workspace", tags=["snapshots"])


@router.get("", response_model=WorkspaceSnapshotResponse)
async def get_workspace_snapshot(
    request: Request,
    year: int | None = Query(default=None),
    member: Member = Depends(get_current_member),
    controller: LifecycleController = Depends(get_lifecycle_controller),
) -> WorkspaceSnapshotResponse:
    """The acting member's budget position, open votes and history."""
    try:
        snapshot = await controller.get_workspace_snapshot(member, year)
    except GrantflowError as e:
        raise problem_exception(e, request) from None
    return WorkspaceSnapshotResponse.from_dto(snapshot)
