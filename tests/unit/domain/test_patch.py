"""Unit tests for proposal patches."""

from datetime import date
from decimal import Decimal

from grantflow.domain.models.patch import UNSET, ProposalPatch


class TestProposalPatch:
    def test_empty_by_default(self) -> None:
        patch = ProposalPatch()

        assert patch.is_empty
        assert patch.provided_fields() == frozenset()
        assert not UNSET

    def test_explicit_none_is_provided(self) -> None:
        patch = ProposalPatch(notes=None, sent_at=None)

        assert not patch.is_empty
        assert patch.provided_fields() == frozenset({"notes", "sent_at"})
        assert patch.as_changes() == {"notes": None, "sent_at": None}

    def test_as_changes_only_provided(self) -> None:
        patch = ProposalPatch(title="New title", proposed_amount=Decimal("12.5"))

        assert patch.is_set("title")
        assert not patch.is_set("description")
        assert patch.as_changes() == {
            "title": "New title",
            "proposed_amount": Decimal("12.5"),
        }

    def test_sent_at_date(self) -> None:
        patch = ProposalPatch(sent_at=date(2026, 5, 1))
        assert patch.as_changes() == {"sent_at": date(2026, 5, 1)}
