"""Actor resolution from the X-Member-Id header.

Authentication happens upstream; this module only turns the forwarded
member id into a Member with a role from the member directory.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Header, HTTPException, status

from grantflow.api.dependencies.foundation import get_member_directory
from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.domain.models.member import Member

logger = structlog.get_logger(__name__)

MEMBER_HEADER = "X-Member-Id"


async def _resolve_member(
    member_id: str, directory: MemberDirectoryProtocol
) -> Member:
    log = logger.bind(component="member_auth")
    try:
        member_uuid = UUID(member_id)
    except ValueError:
        log.warning("auth_failed", reason="invalid_member_id", member_id=member_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid member ID format (must be UUID)",
        ) from None

    member = await directory.get(member_uuid)
    if member is None:
        log.warning("auth_failed", reason="unknown_member", member_id=member_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown member",
        )
    return member


async def get_current_member(
    x_member_id: Annotated[
        str | None,
        Header(description="ID of the acting foundation member."),
    ] = None,
    directory: MemberDirectoryProtocol = Depends(get_member_directory),
) -> Member:
    """Resolve the acting member.

    Raises:
        HTTPException 401: If the header is missing or the member unknown.
        HTTPException 400: If the header is not a UUID.
    """
    if not x_member_id:
        logger.warning("auth_failed", reason="missing_member_id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{MEMBER_HEADER} header is required",
        )
    return await _resolve_member(x_member_id, directory)


async def get_optional_member(
    x_member_id: Annotated[
        str | None,
        Header(description="ID of the viewing foundation member, if any."),
    ] = None,
    directory: MemberDirectoryProtocol = Depends(get_member_directory),
) -> Member | None:
    """Resolve the viewing member when the header is present."""
    if not x_member_id:
        return None
    return await _resolve_member(x_member_id, directory)
