"""In-memory proposal repository.

Compare-and-swap writes run under an asyncio.Lock so that the version
check and the write are one step, like a conditional UPDATE. The vote
stub takes the same lock to insert votes, standing in for the row lock
a vote insert holds on the proposal in the SQL store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from dataclasses import replace
from uuid import UUID

from grantflow.application.ports.proposal_repository import ProposalRepositoryProtocol
from grantflow.domain.models.proposal import GrantProposal, ProposalStatus


class ProposalRepositoryStub(ProposalRepositoryProtocol):
    """In-memory implementation of ProposalRepositoryProtocol.

    Attributes:
        _proposals: Proposals keyed by id, in insertion order.
        write_lock: Lock held by every write after creation.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._proposals: dict[UUID, GrantProposal] = {}
        self.write_lock = asyncio.Lock()

    async def save(self, proposal: GrantProposal) -> None:
        if proposal.id in self._proposals:
            raise ValueError(f"Proposal already exists: {proposal.id}")
        self._proposals[proposal.id] = proposal

    async def get(self, proposal_id: UUID) -> GrantProposal | None:
        # Yield like real I/O so concurrent callers interleave
        await asyncio.sleep(0)
        return self._proposals.get(proposal_id)

    async def list_by_year(
        self,
        year: int,
        statuses: Collection[ProposalStatus] | None = None,
    ) -> list[GrantProposal]:
        wanted = frozenset(statuses) if statuses is not None else None
        matches = [
            p
            for p in self._proposals.values()
            if p.budget_year == year and (wanted is None or p.status in wanted)
        ]
        return sorted(matches, key=lambda p: p.created_at)

    async def list_by_statuses(
        self, statuses: Collection[ProposalStatus]
    ) -> list[GrantProposal]:
        wanted = frozenset(statuses)
        matches = [p for p in self._proposals.values() if p.status in wanted]
        return sorted(matches, key=lambda p: p.created_at)

    async def list_by_ids(self, proposal_ids: Collection[UUID]) -> list[GrantProposal]:
        return [self._proposals[pid] for pid in proposal_ids if pid in self._proposals]

    async def list_by_proposer(self, proposer_id: UUID) -> list[GrantProposal]:
        matches = [p for p in self._proposals.values() if p.proposer_id == proposer_id]
        return sorted(matches, key=lambda p: p.created_at, reverse=True)

    async def list_budget_years(self) -> list[int]:
        return sorted({p.budget_year for p in self._proposals.values()}, reverse=True)

    async def replace_if_version(
        self,
        proposal: GrantProposal,
        expected_version: int,
    ) -> bool:
        async with self.write_lock:
            current = self._proposals.get(proposal.id)
            if current is None or current.version != expected_version:
                return False
            self._proposals[proposal.id] = proposal
            return True

    def peek_locked(self, proposal_id: UUID) -> GrantProposal | None:
        """Read a proposal while the caller holds ``write_lock``."""
        return self._proposals.get(proposal_id)

    def bump_version_locked(self, proposal_id: UUID) -> None:
        """Increment a proposal's version while the caller holds ``write_lock``."""
        current = self._proposals[proposal_id]
        self._proposals[proposal_id] = replace(current, version=current.version + 1)

    def clear(self) -> None:
        """Clear all stored proposals (for testing)."""
        self._proposals.clear()
