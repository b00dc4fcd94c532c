"""Unit tests for meeting decision rules."""

from uuid import uuid4

import pytest

from grantflow.domain.errors import (
    InvalidDecisionTransitionError,
    ProposalAlreadyDecidedError,
)
from grantflow.domain.models.member import AppRole
from grantflow.domain.models.proposal import ProposalStatus
from grantflow.domain.services.decision_rules import (
    may_decide,
    validate_decision_transition,
)


class TestMayDecide:
    @pytest.mark.parametrize("role", [AppRole.OVERSIGHT, AppRole.MANAGER])
    def test_chairs_decide_everything(self, role: AppRole) -> None:
        for status in (ProposalStatus.APPROVED, ProposalStatus.DECLINED, ProposalStatus.SENT):
            assert may_decide(role, status)

    def test_admin_only_marks_sent(self) -> None:
        assert may_decide(AppRole.ADMIN, ProposalStatus.SENT)
        assert not may_decide(AppRole.ADMIN, ProposalStatus.APPROVED)
        assert not may_decide(AppRole.ADMIN, ProposalStatus.DECLINED)

    def test_member_decides_nothing(self) -> None:
        assert not may_decide(AppRole.MEMBER, ProposalStatus.APPROVED)
        assert not may_decide(AppRole.MEMBER, ProposalStatus.SENT)

    def test_to_review_is_not_a_decision(self) -> None:
        assert not may_decide(AppRole.OVERSIGHT, ProposalStatus.TO_REVIEW)


class TestValidateDecisionTransition:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (ProposalStatus.TO_REVIEW, ProposalStatus.APPROVED),
            (ProposalStatus.TO_REVIEW, ProposalStatus.DECLINED),
            (ProposalStatus.APPROVED, ProposalStatus.SENT),
        ],
    )
    def test_valid_moves(self, current: ProposalStatus, target: ProposalStatus) -> None:
        validate_decision_transition(uuid4(), current, target)

    def test_skip_to_sent_is_invalid(self) -> None:
        with pytest.raises(InvalidDecisionTransitionError) as exc_info:
            validate_decision_transition(
                uuid4(), ProposalStatus.TO_REVIEW, ProposalStatus.SENT
            )
        assert exc_info.value.from_status is ProposalStatus.TO_REVIEW

    def test_back_to_review_is_invalid(self) -> None:
        with pytest.raises(InvalidDecisionTransitionError):
            validate_decision_transition(
                uuid4(), ProposalStatus.APPROVED, ProposalStatus.TO_REVIEW
            )

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (ProposalStatus.APPROVED, ProposalStatus.APPROVED),
            (ProposalStatus.APPROVED, ProposalStatus.DECLINED),
            (ProposalStatus.DECLINED, ProposalStatus.APPROVED),
            (ProposalStatus.DECLINED, ProposalStatus.SENT),
            (ProposalStatus.SENT, ProposalStatus.SENT),
        ],
    )
    def test_redeciding_is_a_conflict(
        self, current: ProposalStatus, target: ProposalStatus
    ) -> None:
        with pytest.raises(ProposalAlreadyDecidedError) as exc_info:
            validate_decision_transition(uuid4(), current, target)
        assert exc_info.value.status_code == 409
