"""
Comprehensive tests for shared_utils.validation.

Covers the InputValidator static methods.
"""

import pytest

from shared_utils.validation import InputValidator
from shared_utils.error_handler import ValidationError


# ---------------------------------------------------------------------------
# validate_non_empty_string
# ---------------------------------------------------------------------------


class TestValidateNonEmptyString:
    def test_success(self) -> None:
        assert InputValidator.validate_non_empty_string("hello", "field") == "hello"

    def test_strips_whitespace(self) -> None:
        assert InputValidator.validate_non_empty_string("  hello  ", "field") == "hello"

    def test_empty_raises(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            InputValidator.validate_non_empty_string("", "name")

    def test_whitespace_only_raises(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            InputValidator.validate_non_empty_string("   ", "test_field")

    def test_non_string_raises(self) -> None:
        with pytest.raises(ValidationError, match="must be a string"):
            InputValidator.validate_non_empty_string(123, "field")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# validate_positive_int
# ---------------------------------------------------------------------------


class TestValidatePositiveInt:
    def test_positive_value(self) -> None:
        assert InputValidator.validate_positive_int(5, "count") == 5

    def test_zero_not_allowed_by_default(self) -> None:
        with pytest.raises(ValidationError, match=">= 1"):
            InputValidator.validate_positive_int(0, "--expires")

    def test_zero_allowed_when_flag_set(self) -> None:
        assert InputValidator.validate_positive_int(0, "--max-pages", allow_zero=True) == 0

    def test_negative_raises(self) -> None:
        with pytest.raises(ValidationError, match=">= 0"):
            InputValidator.validate_positive_int(-1, "--max-items", allow_zero=True)

    @pytest.mark.parametrize("value", ["5", 1.5, None, True])
    def test_non_int_raises(self, value) -> None:
        with pytest.raises(ValidationError, match="must be an integer"):
            InputValidator.validate_positive_int(value, "count")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# validate_urn
# ---------------------------------------------------------------------------


class TestValidateUrn:
    @pytest.mark.parametrize(
        "urn",
        [
            "urn:li:organization:2414183",
            "urn:li:person:abc-DEF_1",
            "urn:li:sponsoredAccount:507404993",
            "urn:li:digitalmediaMediaArtifact:(urn:li:digitalmediaAsset:C5,x)",
        ],
    )
    def test_valid(self, urn: str) -> None:
        assert InputValidator.validate_urn(urn, "owner") == urn

    def test_strips(self) -> None:
        assert InputValidator.validate_urn(" urn:li:organization:1 ", "owner") == "urn:li:organization:1"

    @pytest.mark.parametrize("value", ["organization:1", "urn:li:organization", "urn:li:organization:", "urn::x:1"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValidationError, match="owner must be a URN") as exc_info:
            InputValidator.validate_urn(value, "owner")
        assert exc_info.value.context["field"] == "owner"

    def test_empty(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            InputValidator.validate_urn("", "owner")
