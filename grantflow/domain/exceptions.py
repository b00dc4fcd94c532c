"""Base exception classes for the Grantflow domain layer."""

from __future__ import annotations

from typing import Any, ClassVar


class GrantflowError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so the
    calling layer can render any failure the same way: a human-readable
    message plus a stable ``kind`` string.

    Class Attributes:
        kind: Stable machine-readable error kind.
        status_code: HTTP status the API layer maps this error to.
        type_uri: RFC 7807 problem type URI.
        title: Short human-readable summary of the problem type.
    """

    kind: ClassVar[str] = "internal"
    status_code: ClassVar[int] = 500
    type_uri: ClassVar[str] = "urn:grantflow:error"
    title: ClassVar[str] = "Grantflow Error"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message

    def problem_extensions(self) -> dict[str, Any]:
        """Extra members added to the RFC 7807 payload.

        Subclasses override this to expose entity identifiers.
        """
        return {}

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary with type, title, status, detail and kind members.
        """
        result: dict[str, Any] = {
            "type": self.type_uri,
            "title": self.title,
            "status": self.status_code,
            "detail": self.message,
            "kind": self.kind,
        }
        result.update(self.problem_extensions())
        return result
