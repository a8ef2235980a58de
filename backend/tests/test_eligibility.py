"""
Pincode eligibility rules.

Boundaries of every configured range are eligible; their immediate neighbours
outside the ranges are not.
"""

from __future__ import annotations

import pytest

from backpack.core.config import settings
from backpack.core.errors import IneligiblePincode, InvalidPincodeFormat, ValidationError
from backpack.services.eligibility import (
    INELIGIBLE,
    INVALID_FORMAT,
    describe_ranges,
    require_eligible,
    validate_pincode,
)


@pytest.mark.parametrize(
    "pincode",
    ["560001", "560150", "560300", "561000", "561500", "561999", "562000", "562999"],
)
def test_pincodes_inside_ranges_are_eligible(pincode: str) -> None:
    result = validate_pincode(pincode)
    assert result.eligible is True
    assert result.reason is None


@pytest.mark.parametrize(
    "pincode",
    ["560000", "560301", "560999", "563000", "110001", "000000", "999999"],
)
def test_pincodes_outside_ranges_are_ineligible(pincode: str) -> None:
    result = validate_pincode(pincode)
    assert result.eligible is False
    assert result.reason == INELIGIBLE


@pytest.mark.parametrize(
    "pincode",
    ["", "56001", "5600011", "56000A", "abcdef", " 560001", "560001 ", "560001\n", "560-01", None, 560001],
)
def test_malformed_pincodes_are_rejected_as_format_errors(pincode) -> None:
    result = validate_pincode(pincode)
    assert result.eligible is False
    assert result.reason == INVALID_FORMAT


def test_ranges_can_be_supplied_explicitly() -> None:
    ranges = [(110001, 110099)]
    assert validate_pincode("110050", ranges).eligible is True
    assert validate_pincode("560001", ranges).reason == INELIGIBLE


class TestRequireEligible:
    def test_returns_pincode_when_eligible(self) -> None:
        assert require_eligible("562000") == "562000"

    def test_raises_format_error(self) -> None:
        with pytest.raises(InvalidPincodeFormat) as exc_info:
            require_eligible("12345")
        assert exc_info.value.status_code == 400
        assert "6 digits" in exc_info.value.message

    def test_raises_ineligible_error(self) -> None:
        with pytest.raises(IneligiblePincode):
            require_eligible("563000")

    def test_both_failures_are_validation_errors(self) -> None:
        assert issubclass(InvalidPincodeFormat, ValidationError)
        assert issubclass(IneligiblePincode, ValidationError)

    def test_ineligible_message_lists_default_ranges(self) -> None:
        with pytest.raises(IneligiblePincode) as exc_info:
            require_eligible("563000")
        assert exc_info.value.message == (
            "Invalid Bangalore pincode. Must be in range 560001-560300, 561xxx, or 562xxx."
        )

    def test_ineligible_message_follows_configured_ranges(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "ELIGIBLE_PINCODE_RANGES", [(110001, 110099)])

        with pytest.raises(IneligiblePincode) as exc_info:
            require_eligible("560001")
        assert exc_info.value.message.endswith("Must be in range 110001-110099.")


@pytest.mark.parametrize(
    "ranges,expected",
    [
        ([(560001, 560300)], "560001-560300"),
        ([(561000, 561999), (562000, 562999)], "561xxx or 562xxx"),
        ([(560001, 560300), (561000, 561999), (562000, 562999)], "560001-560300, 561xxx, or 562xxx"),
        ([(560100, 560100)], "560100"),
    ],
)
def test_describe_ranges(ranges, expected: str) -> None:
    assert describe_ranges(ranges) == expected
