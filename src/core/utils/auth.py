"""Caller identity extraction from API Gateway authorizer context."""

from dataclasses import dataclass
from typing import Any

from core.models.errors import AuthenticationError


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller as asserted by the Cognito authorizer."""

    user_id: str
    username: str


def _authorizer_claims(event: dict[str, Any]) -> dict[str, Any]:
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}

    # REST API Cognito authorizer
    claims = authorizer.get("claims")
    if isinstance(claims, dict):
        return claims

    # HTTP API JWT authorizer
    jwt = authorizer.get("jwt") or {}
    claims = jwt.get("claims")
    if isinstance(claims, dict):
        return claims

    return {}


def get_caller_identity(event: dict[str, Any]) -> CallerIdentity:
    """Return the authenticated caller or raise.

    Raises:
        AuthenticationError: If the event carries no verified subject
    """
    claims = _authorizer_claims(event)
    user_id = claims.get("sub")

    if not isinstance(user_id, str) or not user_id.strip():
        raise AuthenticationError()

    username = claims.get("cognito:username") or claims.get("username") or user_id
    return CallerIdentity(user_id=user_id, username=str(username))
