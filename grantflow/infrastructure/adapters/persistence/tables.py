"""Relational schema (SQLAlchemy Core).

Money is stored as NUMERIC(14, 2) and ratios as NUMERIC(8, 6). Vote
uniqueness per (proposal_id, voter_id) is a composite unique constraint,
which is what makes concurrent duplicate votes end with a single row.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
)

metadata = MetaData()

MONEY = Numeric(14, 2, asdecimal=True)
RATIO = Numeric(8, 6, asdecimal=True)

budgets = Table(
    "budgets",
    metadata,
    Column("budget_year", Integer, primary_key=True, autoincrement=False),
    Column("annual_fund_size", MONEY, nullable=False),
    Column("joint_ratio", RATIO, nullable=False),
    Column("discretionary_ratio", RATIO, nullable=False),
    Column("rollover_from_previous_year", MONEY, nullable=False),
    Column("meeting_reveal_enabled", Boolean, nullable=False, default=False),
    Column("updated_by", Uuid, nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

grant_proposals = Table(
    "grant_proposals",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("proposal_type", String(20), nullable=False),
    Column("proposer_id", Uuid, nullable=False),
    Column("budget_year", Integer, nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("proposed_amount", MONEY, nullable=False),
    Column("allocation_mode", String(10), nullable=False),
    Column("status", String(20), nullable=False),
    Column("reveal_votes", Boolean, nullable=False, default=False),
    Column("organization_id", Uuid, nullable=True),
    Column("notes", Text, nullable=True),
    Column("website", Text, nullable=True),
    Column("charity_navigator_url", Text, nullable=True),
    Column("final_amount", MONEY, nullable=True),
    Column("sent_at", Date, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Column("version", Integer, nullable=False, default=0),
    Index("ix_grant_proposals_budget_year", "budget_year"),
    Index("ix_grant_proposals_proposer_id", "proposer_id"),
)

votes = Table(
    "votes",
    metadata,
    # Surrogate sequence keeps insertion order
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", Uuid, nullable=False, unique=True),
    Column(
        "proposal_id",
        Uuid,
        ForeignKey("grant_proposals.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("voter_id", Uuid, nullable=False),
    Column("choice", String(20), nullable=False),
    Column("allocation_amount", MONEY, nullable=False),
    Column("flag_comment", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("proposal_id", "voter_id", name="uq_votes_proposal_voter"),
    Index("ix_votes_voter_id", "voter_id"),
)

audit_log = Table(
    "audit_log",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("actor_id", Uuid, nullable=False),
    Column("action", String(64), nullable=False),
    Column("entity_type", String(32), nullable=False),
    Column("entity_id", String(64), nullable=False),
    Column("details", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

member_profiles = Table(
    "member_profiles",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("full_name", Text, nullable=False),
    Column("role", String(20), nullable=False),
    Column("email", Text, nullable=True),
)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to timestamps read back without tzinfo (SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
