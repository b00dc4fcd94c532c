"""Foundation member and role model.

Roles are owned by an external directory; the engine only reads them.

Role capabilities:
    MEMBER: submit any proposal, vote
    OVERSIGHT: submit any proposal, vote, run the meeting, edit budgets
    MANAGER: submit joint proposals, run the meeting, edit budgets
    ADMIN: work the admin queue (mark approved proposals sent)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class AppRole(Enum):
    """Application role of a foundation member."""

    MEMBER = "member"
    OVERSIGHT = "oversight"
    ADMIN = "admin"
    MANAGER = "manager"

    def is_voting_role(self) -> bool:
        """Check whether members with this role count toward required votes."""
        return self in VOTING_ROLES


VOTING_ROLES: frozenset[AppRole] = frozenset({AppRole.MEMBER, AppRole.OVERSIGHT})

PROPOSER_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.MEMBER, AppRole.OVERSIGHT, AppRole.MANAGER}
)

# Roles allowed to reveal votes and record approve/decline decisions
MEETING_CHAIR_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.OVERSIGHT, AppRole.MANAGER}
)

BUDGET_EDITOR_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.OVERSIGHT, AppRole.MANAGER}
)

ADMIN_QUEUE_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.ADMIN, AppRole.OVERSIGHT, AppRole.MANAGER}
)


@dataclass(frozen=True, eq=True)
class Member:
    """A foundation member as seen by the engine.

    Attributes:
        id: Member identifier.
        name: Display name.
        role: Application role.
        email: Contact email (optional).
    """

    id: UUID
    name: str
    role: AppRole
    email: str | None = None

    @property
    def is_voting(self) -> bool:
        return self.role.is_voting_role()
