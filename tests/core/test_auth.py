import pytest

from core.models.errors import AuthenticationError
from core.utils.auth import get_caller_identity


class TestGetCallerIdentity:
    def test_reads_rest_authorizer_claims(self) -> None:
        event = {
            "requestContext": {
                "authorizer": {"claims": {"sub": "user-1", "cognito:username": "alice"}}
            }
        }

        caller = get_caller_identity(event)

        assert caller.user_id == "user-1"
        assert caller.username == "alice"

    def test_reads_http_api_jwt_claims(self) -> None:
        event = {
            "requestContext": {
                "authorizer": {"jwt": {"claims": {"sub": "user-2", "username": "bob"}}}
            }
        }

        caller = get_caller_identity(event)

        assert caller.user_id == "user-2"
        assert caller.username == "bob"

    def test_username_falls_back_to_subject(self) -> None:
        event = {"requestContext": {"authorizer": {"claims": {"sub": "user-3"}}}}

        assert get_caller_identity(event).username == "user-3"

    @pytest.mark.parametrize(
        "event",
        [
            {},
            {"requestContext": None},
            {"requestContext": {"authorizer": {}}},
            {"requestContext": {"authorizer": {"claims": {"sub": "   "}}}},
            {"requestContext": {"authorizer": {"claims": {"email": "a@b.com"}}}},
        ],
    )
    def test_missing_subject_is_unauthenticated(self, event) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            get_caller_identity(event)

        assert exc_info.value.status == 401

    def test_body_supplied_identity_is_ignored(self) -> None:
        event = {"body": '{"userId": "attacker"}', "requestContext": {}}

        with pytest.raises(AuthenticationError):
            get_caller_identity(event)
