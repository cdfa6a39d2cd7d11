"""Tests for provider_sim.auth — credential validation and key redaction."""

import pytest
from multidict import CIMultiDict

from provider_sim.auth import (
    API_KEY_HEADER,
    AuthError,
    InvalidKeyError,
    MissingKeyError,
    check_key,
    redact_key,
)

EXPECTED = "sk-poc-hardcoded-api-key-for-testing"


class TestRedactKey:
    def test_long_key_keeps_first_and_last_four(self) -> None:
        assert redact_key("sk-abcdefgh-1234") == "sk-a...1234"

    def test_nine_characters(self) -> None:
        assert redact_key("wrong-key") == "wron...-key"

    @pytest.mark.parametrize("key", ["a", "abc", "sk-test", "12345678"])
    def test_short_key_fully_masked(self, key: str) -> None:
        assert redact_key(key) == "****"

    def test_redacted_form_never_contains_full_key(self) -> None:
        for key in ["x", "sk-1234", "abcdefgh", "abcdefghi", EXPECTED]:
            assert key not in redact_key(key)


class TestCheckKey:
    def test_matching_key(self) -> None:
        assert check_key({API_KEY_HEADER: EXPECTED}, EXPECTED) is None

    def test_lowercase_header_name(self) -> None:
        assert check_key({"x-provider-api-key": EXPECTED}, EXPECTED) is None

    def test_case_insensitive_multidict(self) -> None:
        headers = CIMultiDict({"X-PROVIDER-API-KEY": EXPECTED})
        assert check_key(headers, EXPECTED) is None

    def test_missing_header(self) -> None:
        error = check_key({}, EXPECTED)
        assert isinstance(error, MissingKeyError)
        assert error.code == "missing_api_key"
        assert error.status == 401

    def test_empty_header_is_missing(self) -> None:
        error = check_key({API_KEY_HEADER: ""}, EXPECTED)
        assert isinstance(error, MissingKeyError)

    def test_wrong_key(self) -> None:
        error = check_key({API_KEY_HEADER: "wrong-key"}, EXPECTED)
        assert isinstance(error, InvalidKeyError)
        assert error.code == "invalid_api_key"
        assert error.message == "Invalid API key provided: wron...-key"
        assert "wrong-key" not in error.message

    def test_short_wrong_key_does_not_fail(self) -> None:
        error = check_key({API_KEY_HEADER: "ab"}, EXPECTED)
        assert isinstance(error, InvalidKeyError)
        assert error.message == "Invalid API key provided: ****"

    def test_prefix_of_expected_key_is_rejected(self) -> None:
        error = check_key({API_KEY_HEADER: EXPECTED[:-1]}, EXPECTED)
        assert isinstance(error, InvalidKeyError)

    def test_key_with_surrounding_whitespace_is_rejected(self) -> None:
        error = check_key({API_KEY_HEADER: f"{EXPECTED} "}, EXPECTED)
        assert isinstance(error, InvalidKeyError)

    def test_any_content_accepted_when_equal(self) -> None:
        assert check_key({API_KEY_HEADER: "k"}, "k") is None


class TestErrorEnvelope:
    def test_missing_key_envelope(self) -> None:
        assert MissingKeyError().to_dict() == {
            "error": {
                "message": "Missing API key. Set X-Provider-Api-Key header.",
                "type": "authentication_error",
                "code": "missing_api_key",
            }
        }

    def test_invalid_key_envelope(self) -> None:
        body = InvalidKeyError("sk-abcdefgh-1234").to_dict()
        assert body["error"]["type"] == "authentication_error"
        assert body["error"]["code"] == "invalid_api_key"
        assert body["error"]["message"].endswith("sk-a...1234")

    def test_envelope_is_stable_for_identical_input(self) -> None:
        assert InvalidKeyError("wrong-key").to_dict() == InvalidKeyError("wrong-key").to_dict()

    def test_errors_are_auth_errors(self) -> None:
        assert issubclass(MissingKeyError, AuthError)
        assert issubclass(InvalidKeyError, AuthError)
