"""
Grantflow - Family Foundation Giving Engine

Members propose grants, vote on them blindly, and the oversight board
reveals the tallies and records binding decisions at the annual meeting.

Core rules:
- One vote per member per proposal, never rewritten
- Joint proposals are funded by the sum of pledged "yes" allocations
- Discretionary proposals carry the proposer's own amount, capped per member
- Decisions are final and lock the funded amount
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
