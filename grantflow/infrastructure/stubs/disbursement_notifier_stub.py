"""Disbursement notifier that records what it was told."""

from __future__ import annotations

from uuid import UUID

import structlog

from grantflow.application.ports.disbursement_notifier import (
    DisbursementNotifierProtocol,
)
from grantflow.domain.models.proposal import GrantProposal

logger = structlog.get_logger(__name__)


class DisbursementNotifierStub(DisbursementNotifierProtocol):
    """Logs and records sent proposals instead of calling an admin system."""

    def __init__(self) -> None:
        self.sent: list[UUID] = []

    async def notify_sent(self, proposal: GrantProposal) -> None:
        self.sent.append(proposal.id)
        logger.info(
            "disbursement_signalled",
            proposal_id=str(proposal.id),
            final_amount=str(proposal.final_amount),
        )

    def clear(self) -> None:
        self.sent.clear()
