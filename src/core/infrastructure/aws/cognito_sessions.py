"""Cognito-backed session revocation."""

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.cognito_adapter import CognitoAdapter
from core.models.errors import IdentityProviderError

logger = Logger(UTC=True)


class CognitoSessions:
    """Ends a user's sessions in the Cognito user pool."""

    def __init__(self, adapter: CognitoAdapter | None = None) -> None:
        self._cognito = adapter or CognitoAdapter()

    def sign_out_everywhere(self, *, username: str) -> None:
        """Revoke every token issued to the user.

        Raises:
            IdentityProviderError: If Cognito rejects the request
        """
        try:
            self._cognito.global_sign_out(username=username)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Cognito global sign-out failed")
            raise IdentityProviderError(
                message="Unable to end user sessions",
            ) from exc

        logger.info("User signed out of all sessions")
