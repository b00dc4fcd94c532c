"""Request actor resolution."""

from grantflow.api.auth.member_auth import get_current_member, get_optional_member

__all__: list[str] = ["get_current_member", "get_optional_member"]
