"""Unit value parsing for ordered requirement tags."""

from __future__ import annotations

import math
import re

# Magnitudes are expressed in gigabytes.
MB_PER_GB = 1024

_BARE_NUMBER = re.compile(r"^(?:\d+\.?\d*|\.\d+)$")
_NUMBER_WITH_UNIT = re.compile(r"(\d+(?:\.\d+)?|\.\d+)\s*(gb|mb)", flags=re.IGNORECASE)
_ANY_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def parse_magnitude(label: object) -> float:
    """Convert a tag label to a magnitude in gigabytes.

    Parameters
    ----------
    label
        Tag label. Supported forms:
        - numbers (``8``, ``0.5``) taken as gigabytes
        - bare numeric strings (``"16"``, ``" 1.5 "``) taken as gigabytes
        - strings with a unit (``"8GB"``, ``"512 mb"``, ``"4GB VRAM"``)
        - any other string containing a number, whose first number is
          taken as gigabytes

    Returns
    -------
    float
        The magnitude, or ``0.0`` when nothing numeric can be found. This
        function never raises.
    """
    if isinstance(label, bool):
        return 0.0
    if isinstance(label, (int, float)):
        value = float(label)
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value
    if not isinstance(label, str):
        return 0.0

    text = label.strip()
    if _BARE_NUMBER.match(text):
        return float(text)

    unit_value = find_unit_magnitude(text)
    if unit_value is not None:
        return unit_value

    number_match = _ANY_NUMBER.search(text)
    if number_match:
        return float(number_match.group(0))
    return 0.0


def find_unit_magnitude(text: str) -> float | None:
    """Return the first ``<number> GB|MB`` magnitude in ``text``, if any."""
    unit_match = _NUMBER_WITH_UNIT.search(text)
    if not unit_match:
        return None
    value = float(unit_match.group(1))
    if unit_match.group(2).lower() == "mb":
        value /= MB_PER_GB
    return value


def has_magnitude(label: object) -> bool:
    """Return True when ``label`` carries a numeric token at all."""
    if isinstance(label, bool):
        return False
    if isinstance(label, (int, float)):
        return math.isfinite(float(label))
    if isinstance(label, str):
        return _ANY_NUMBER.search(label) is not None
    return False


__all__ = ["MB_PER_GB", "find_unit_magnitude", "has_magnitude", "parse_magnitude"]
