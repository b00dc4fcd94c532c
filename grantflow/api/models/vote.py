"""Vote API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, Field

from grantflow.domain.models.vote import VoteChoice


class CastVoteRequest(BaseModel):
    """A ballot.

    Joint proposals take ``yes`` (with ``allocation_amount``) or ``no``.
    Discretionary proposals take ``acknowledged`` or ``flagged`` (with
    ``flag_comment``).
    """

    choice: VoteChoice
    allocation_amount: Decimal | None = None
    flag_comment: str | None = Field(default=None, max_length=2000)


class VoteAcceptedResponse(BaseModel):
    ok: bool = True
