import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from backpack.core.config import settings
from backpack.core.errors import IneligiblePincode, InvalidPincodeFormat

PINCODE_PATTERN = re.compile(r"[0-9]{6}")

INVALID_FORMAT = "invalid_format"
INELIGIBLE = "ineligible"


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: Optional[str] = None


def _in_ranges(value: int, ranges: Iterable[Tuple[int, int]]) -> bool:
    return any(low <= value <= high for low, high in ranges)


def describe_ranges(ranges: Iterable[Tuple[int, int]]) -> str:
    """
    Render ranges for error messages. A range covering a whole thousand block
    is written as its prefix: (561000, 561999) -> "561xxx".
    """
    parts = []
    for low, high in ranges:
        if low % 1000 == 0 and high == low + 999:
            parts.append(f"{low // 1000}xxx")
        elif low == high:
            parts.append(str(low))
        else:
            parts.append(f"{low}-{high}")

    if len(parts) <= 2:
        return " or ".join(parts)
    return ", ".join(parts[:-1]) + ", or " + parts[-1]


def validate_pincode(pincode, ranges: Optional[Sequence[Tuple[int, int]]] = None) -> EligibilityResult:
    """
    Check a 6-digit pincode against the configured inclusive ranges.
    Pure function: nothing is logged or stored.
    """
    if ranges is None:
        ranges = settings.ELIGIBLE_PINCODE_RANGES

    if not isinstance(pincode, str) or not PINCODE_PATTERN.fullmatch(pincode):
        return EligibilityResult(eligible=False, reason=INVALID_FORMAT)

    if not _in_ranges(int(pincode), ranges):
        return EligibilityResult(eligible=False, reason=INELIGIBLE)

    return EligibilityResult(eligible=True)


def require_eligible(pincode, ranges: Optional[Sequence[Tuple[int, int]]] = None) -> str:
    """Raise a ValidationError subclass unless the pincode is eligible"""
    if ranges is None:
        ranges = settings.ELIGIBLE_PINCODE_RANGES

    result = validate_pincode(pincode, ranges)
    if result.reason == INVALID_FORMAT:
        raise InvalidPincodeFormat()
    if result.reason == INELIGIBLE:
        raise IneligiblePincode.for_ranges(describe_ranges(ranges))
    return pincode
