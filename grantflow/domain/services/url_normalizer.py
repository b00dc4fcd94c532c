"""Normalisation of optional website links."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from grantflow.domain.errors.proposal import ProposalValidationError

ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def normalize_optional_http_url(value: str | None, field: str, label: str) -> str | None:
    """Normalise a user-entered link.

    Blank input clears the link. A link without a scheme is assumed to be
    ``https://``. Only http and https links are accepted.

    Args:
        value: Raw input.
        field: Field name reported on failure.
        label: Human-readable field label for the message.

    Returns:
        The normalised URL, or None for blank input.

    Raises:
        ProposalValidationError: If the link is not a valid http(s) URL.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return None

    lowered = trimmed.lower()
    if not (lowered.startswith("http://") or lowered.startswith("https://")):
        if "://" in trimmed:
            raise ProposalValidationError(
                field, f"{label} must start with http:// or https://."
            )
        trimmed = f"https://{trimmed}"

    try:
        parts = urlsplit(trimmed)
        # Accessing port validates it
        _ = parts.port
    except ValueError as e:
        raise ProposalValidationError(field, f"{label} must be a valid URL.") from e

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise ProposalValidationError(
            field, f"{label} must start with http:// or https://."
        )
    if not parts.hostname or any(ch.isspace() for ch in trimmed):
        raise ProposalValidationError(field, f"{label} must be a valid URL.")

    path = parts.path or "/"
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment)
    )
