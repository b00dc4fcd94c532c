"""Proposal repository port.

Every change after creation goes through a compare-and-swap on the
proposal version: the write only happens if the stored version still
equals the version the caller read. A False return means another
request, or a vote, changed the proposal first.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol
from uuid import UUID

from grantflow.domain.models.proposal import GrantProposal, ProposalStatus


class ProposalRepositoryProtocol(Protocol):
    """Protocol for proposal storage.

    Methods:
        save: Store a new proposal
        get: Proposal by id
        list_by_year: Proposals of a budget year
        list_by_ids: Proposals by id
        list_by_statuses: Proposals of any year by status
        list_by_proposer: A member's proposals
        list_budget_years: Distinct budget years with proposals
        replace_if_version: Compare-and-swap write of a whole proposal
    """

    async def save(self, proposal: GrantProposal) -> None:
        """Store a new proposal.

        Raises:
            ValueError: If a proposal with the same id already exists.
        """
        ...

    async def get(self, proposal_id: UUID) -> GrantProposal | None:
        """Retrieve a proposal by id, None if missing."""
        ...

    async def list_by_year(
        self,
        year: int,
        statuses: Collection[ProposalStatus] | None = None,
    ) -> list[GrantProposal]:
        """List proposals of a budget year, oldest first.

        Args:
            year: Budget year.
            statuses: Optional status filter.

        Returns:
            Matching proposals ordered by created_at ascending.
        """
        ...

    async def list_by_statuses(
        self, statuses: Collection[ProposalStatus]
    ) -> list[GrantProposal]:
        """List proposals of every year with one of the given statuses."""
        ...

    async def list_by_ids(self, proposal_ids: Collection[UUID]) -> list[GrantProposal]:
        """List the proposals with the given ids (missing ids are skipped)."""
        ...

    async def list_by_proposer(self, proposer_id: UUID) -> list[GrantProposal]:
        """List a member's proposals, newest first."""
        ...

    async def list_budget_years(self) -> list[int]:
        """Distinct budget years that have proposals, newest first."""
        ...

    async def replace_if_version(
        self,
        proposal: GrantProposal,
        expected_version: int,
    ) -> bool:
        """Atomically replace a proposal nothing has changed since it was read.

        Implementations MUST perform the version check and the write as one
        atomic step (single conditional UPDATE or equivalent lock), and
        share that step with vote inserts so a vote landing between a read
        and a write makes the write miss.

        Args:
            proposal: New state of the proposal (same id, version already
                incremented).
            expected_version: Version the stored row must still have.

        Returns:
            True if the write happened, False if the stored version differs
            or the proposal is gone.
        """
        ...
