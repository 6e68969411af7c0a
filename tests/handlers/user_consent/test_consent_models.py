import pytest
from pydantic import ValidationError

from handlers.user_consent.models import RecordConsentRequest


class TestRecordConsentRequest:
    def test_accepts_known_type(self) -> None:
        request = RecordConsentRequest.model_validate(
            {"consentType": "marketing", "consentGiven": False, "consentVersion": "2.1"}
        )

        assert request.consent_type == "marketing"
        assert request.consent_given is False
        assert request.consent_text is None

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RecordConsentRequest.model_validate(
                {"consentType": "cookies", "consentGiven": True, "consentVersion": "1"}
            )

        assert "consentType must be one of" in str(exc_info.value)

    def test_consent_given_must_be_boolean(self) -> None:
        with pytest.raises(ValidationError):
            RecordConsentRequest.model_validate(
                {"consentType": "terms", "consentGiven": "yes", "consentVersion": "1"}
            )

    def test_requires_version(self) -> None:
        with pytest.raises(ValidationError):
            RecordConsentRequest.model_validate({"consentType": "terms", "consentGiven": True})
