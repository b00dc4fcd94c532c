"""Meeting API request models."""

from datetime import date

from pydantic import BaseModel

from grantflow.domain.models.proposal import ProposalStatus


class RevealRequest(BaseModel):
    reveal: bool = True


class DecisionRequest(BaseModel):
    """Meeting outcome for a proposal.

    Attributes:
        status: approved, declined or sent.
        sent_at: Payment date for ``sent``; defaults to today (UTC)
            except for admins, who must supply it.
    """

    status: ProposalStatus
    sent_at: date | None = None
