"""Thin adapter for Amazon Cognito user pool administration."""

from typing import Any

import boto3

from core.infrastructure.adapters.client_config import client_kwargs, require_env
from core.utils.constants import ENV_USER_POOL_ID


class CognitoAdapter:
    """Low-level Cognito operations (mechanical, no error handling)."""

    def __init__(self) -> None:
        self._user_pool_id = require_env(ENV_USER_POOL_ID)
        self._client = boto3.client("cognito-idp", **client_kwargs())

    def global_sign_out(self, *, username: str) -> dict[str, Any]:
        """Invalidate every refresh token issued to the user.

        Raises boto3 exceptions - caught by domain implementation.
        """
        response: dict[str, Any] = self._client.admin_user_global_sign_out(
            UserPoolId=self._user_pool_id,
            Username=username,
        )
        return response
