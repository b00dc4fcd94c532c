"""Error kinds shared by every Grantflow operation.

Each operation fails with exactly one of five kinds. The kind tells the
caller what to do next:

- ValidationError: malformed or out-of-range input, fix and retry
- ForbiddenError: role or ownership violation, never retryable as-is
- NotFoundError: referenced entity is missing
- ConflictError: state was already changed by a prior or concurrent call,
  refetch before deciding whether to retry
- InvalidTransitionError: the proposal state machine refused the move
"""

from __future__ import annotations

from grantflow.domain.exceptions import GrantflowError


class ValidationError(GrantflowError):
    """Input failed validation (HTTP 400)."""

    kind = "validation"
    status_code = 400
    type_uri = "urn:grantflow:validation"
    title = "Validation Failed"


class ForbiddenError(GrantflowError):
    """Actor lacks the role or ownership required (HTTP 403)."""

    kind = "forbidden"
    status_code = 403
    type_uri = "urn:grantflow:forbidden"
    title = "Forbidden"


class NotFoundError(GrantflowError):
    """Referenced entity does not exist (HTTP 404)."""

    kind = "not_found"
    status_code = 404
    type_uri = "urn:grantflow:not-found"
    title = "Not Found"


class ConflictError(GrantflowError):
    """State already mutated by a concurrent or prior call (HTTP 409)."""

    kind = "conflict"
    status_code = 409
    type_uri = "urn:grantflow:conflict"
    title = "Conflict"


class InvalidTransitionError(GrantflowError):
    """Proposal state machine guard failed (HTTP 400)."""

    kind = "invalid_transition"
    status_code = 400
    type_uri = "urn:grantflow:invalid-transition"
    title = "Invalid Transition"
