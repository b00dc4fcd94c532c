"""Proposal patch type.

A patch carries each editable field with an explicit presence flag: a
field left at ``UNSET`` is not touched, while ``None`` clears it. The
whole patch is validated before any of it is applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Final


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset.UNSET

# Fields any meeting chair may edit at any status
RECORD_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "notes", "website", "charity_navigator_url"}
)


@dataclass(frozen=True)
class ProposalPatch:
    """Requested changes to a proposal.

    Attributes:
        title: New title.
        description: New description.
        proposed_amount: New amount (to_review proposals only).
        notes: Notes (None clears).
        website: Website (None clears).
        charity_navigator_url: Rating page (None clears).
        final_amount: Correction of a past year's decided amount.
        sent_at: Payment date of a sent proposal.
    """

    title: str | _Unset = field(default=UNSET)
    description: str | _Unset = field(default=UNSET)
    proposed_amount: Decimal | _Unset = field(default=UNSET)
    notes: str | None | _Unset = field(default=UNSET)
    website: str | None | _Unset = field(default=UNSET)
    charity_navigator_url: str | None | _Unset = field(default=UNSET)
    final_amount: Decimal | _Unset = field(default=UNSET)
    sent_at: date | None | _Unset = field(default=UNSET)

    def provided_fields(self) -> frozenset[str]:
        """Names of fields that carry a value (including explicit None)."""
        return frozenset(
            f.name for f in fields(self) if getattr(self, f.name) is not UNSET
        )

    @property
    def is_empty(self) -> bool:
        return not self.provided_fields()

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET

    def as_changes(self) -> dict[str, Any]:
        """Provided fields as a dict for dataclasses.replace."""
        return {name: getattr(self, name) for name in self.provided_fields()}
