"""Disbursement notifier port.

Signals the external admin queue that a proposal was marked sent and
its payment may be executed or reconciled.
"""

from __future__ import annotations

from typing import Protocol

from grantflow.domain.models.proposal import GrantProposal


class DisbursementNotifierProtocol(Protocol):
    """Protocol for the admin-queue collaborator."""

    async def notify_sent(self, proposal: GrantProposal) -> None:
        """Signal that ``proposal`` has been marked sent.

        Args:
            proposal: The proposal in its new ``sent`` state.
        """
        ...
