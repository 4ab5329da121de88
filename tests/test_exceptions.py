# tests/test_exceptions.py

"""Tests for the error taxonomy."""

from git_providers.core.exceptions import (
    GitProviderError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    ReconcileError,
    TransportError,
    ValidationFailedError,
    is_error,
)


class TestErrorKinds:
    def test_codes(self):
        assert NotFoundError("x").error_code == "NOT_FOUND"
        assert TransportError("x").error_code == "TRANSPORT_FAILURE"
        assert RateLimitError("x").error_code == "RATE_LIMITED"

    def test_transport_subclasses(self):
        assert issubclass(InvalidCredentialsError, TransportError)
        assert issubclass(RateLimitError, TransportError)

    def test_validation_field_in_details(self):
        error = ValidationFailedError("missing", field="id")
        assert error.field == "id"
        assert error.details == {"field": "id"}

    def test_to_dict(self):
        cause = ValueError("bad")
        error = TransportError("failed", status_code=502, original_error=cause)
        data = error.to_dict()
        assert data["error_type"] == "TransportError"
        assert data["details"] == {"status_code": 502}
        assert data["original_error"] == "bad"

    def test_str_includes_code(self):
        assert str(NotFoundError("gone")) == "NotFoundError: gone (Code: NOT_FOUND)"


class TestIsError:
    def test_direct_match(self):
        assert is_error(NotFoundError("x"), NotFoundError)
        assert is_error(NotFoundError("x"), GitProviderError)

    def test_through_original_error(self):
        wrapped = ReconcileError("failed", action_taken=False, original_error=NotFoundError("x"))
        assert is_error(wrapped, NotFoundError)
        assert not is_error(wrapped, TransportError)

    def test_through_cause(self):
        try:
            try:
                raise RateLimitError("slow down")
            except RateLimitError as e:
                raise RuntimeError("wrapped") from e
        except RuntimeError as outer:
            assert is_error(outer, RateLimitError)

    def test_none(self):
        assert not is_error(None, GitProviderError)
