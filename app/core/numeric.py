"""
Free-form numeric input from the link form.

Operators type assumptions the way they think about them: "1%", "0.8",
"$45", "1,299.00". These parsers never raise. Anything that can't be read
as a usable number resolves to the configured default.

Conversion-rate disambiguation (applied to the bare number, a trailing "%"
carries no meaning of its own):

  x > 1          → a percentage           8    → 0.08
  0.2 < x <= 1   → a small percentage     0.8  → 0.008
  0 < x <= 0.2   → already a fraction     0.008 stays
  x <= 0         → default

Inputs around the 0.2–1 boundary are ambiguous ("0.5" could mean 50% or
0.5%). The rule reads them as percentages. This is a known limitation of
the heuristic.
"""

import math
import re
from dataclasses import dataclass

_NOT_MONEY = re.compile(r"[^0-9.]")
_NOT_RATE = re.compile(r"[^0-9.+\-]")


@dataclass(frozen=True)
class AttributionDefaults:
    """Process-wide assumptions used when a link carries none of its own."""
    conversion_rate: float = 0.008
    average_order_value: float = 45.0


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value) -> float | None:
    try:
        x = float(value)
    except (OverflowError, ValueError):
        return None
    return x if math.isfinite(x) else None


def parse_money(value, defaults: AttributionDefaults) -> float:
    """Parse an average order value. Currency symbols and separators are dropped."""
    if _is_blank(value):
        return defaults.average_order_value
    if _is_number(value):
        x = _to_float(value)
    else:
        # Plain numerals, including exponent form, are taken as written.
        x = _to_float(str(value).strip())
        if x is None or x <= 0:
            x = _to_float(_NOT_MONEY.sub("", str(value)))
    if x is None or x <= 0:
        return defaults.average_order_value
    return x


def parse_conversion_rate(value, defaults: AttributionDefaults) -> float:
    """Parse a conversion rate into a fraction in (0, 1]."""
    if _is_blank(value):
        return defaults.conversion_rate
    if _is_number(value):
        x = _to_float(value)
    else:
        text = str(value).lower().replace("percent", "")
        text = "".join(text.split())
        x = _to_float(_NOT_RATE.sub("", text))
    if x is None:
        return defaults.conversion_rate
    if x > 0.2:
        x = x / 100
    if x <= 0 or x > 1:
        return defaults.conversion_rate
    return x


class NumericNormalizer:
    """Binds the parsers to one set of defaults."""

    def __init__(self, defaults: AttributionDefaults):
        self.defaults = defaults

    def conversion_rate(self, value) -> float:
        return parse_conversion_rate(value, self.defaults)

    def money(self, value) -> float:
        return parse_money(value, self.defaults)
