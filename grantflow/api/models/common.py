"""Shared API field types and error payloads."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Money travels as a JSON number.
Amount = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float)]

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class ProblemDetailResponse(BaseModel):
    """Error response (RFC 7807).

    Attributes:
        type: Error type URI.
        title: Human-readable error title.
        status: HTTP status code.
        detail: Specific error description.
        kind: Stable error kind (validation, forbidden, not_found,
            conflict, invalid_transition).
        instance: Request URL.
    """

    type: str
    title: str
    status: int
    detail: str
    kind: str
    instance: str | None = None
