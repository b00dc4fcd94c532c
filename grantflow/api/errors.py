"""Mapping of domain errors to HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, Request

from grantflow.domain.exceptions import GrantflowError


def problem_exception(error: GrantflowError, request: Request) -> HTTPException:
    """Build an HTTPException carrying the error's RFC 7807 payload.

    Args:
        error: Domain error raised by a service.
        request: Request being answered; its URL becomes ``instance``.

    Returns:
        HTTPException with the error's status and problem details.
    """
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)
    return HTTPException(status_code=error.status_code, detail=detail)
