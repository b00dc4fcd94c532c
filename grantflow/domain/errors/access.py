"""Role and ownership errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from grantflow.domain.errors.kinds import ForbiddenError, NotFoundError

if TYPE_CHECKING:
    from grantflow.domain.models.member import AppRole


class RoleNotPermittedError(ForbiddenError):
    """Raised when the acting member's role may not perform an action.

    Attributes:
        actor_id: Member attempting the action.
        role: The member's role.
        action: Short name of the refused action.
    """

    type_uri = "urn:grantflow:access:role-not-permitted"
    title = "Role Not Permitted"

    def __init__(
        self,
        actor_id: UUID,
        role: AppRole,
        action: str,
        message: str | None = None,
    ) -> None:
        self.actor_id = actor_id
        self.role = role
        self.action = action
        super().__init__(
            message or f"Role '{role.value}' is not permitted to {action}."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "actor_id": str(self.actor_id),
            "role": self.role.value,
            "action": self.action,
        }


class MemberNotFoundError(NotFoundError):
    """Raised when a member id is unknown to the member directory."""

    type_uri = "urn:grantflow:access:member-not-found"
    title = "Member Not Found"

    def __init__(self, member_id: UUID) -> None:
        self.member_id = member_id
        super().__init__(f"Member not found: {member_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"member_id": str(self.member_id)}
