"""Numeric conversions shared by the generator and the importer.

Every value that ends up in stylesheet text goes through ``round_fixed`` so the
importer can read it back with plain pattern matching.
"""

import math
import secrets
import string
from decimal import Decimal, ROUND_HALF_UP

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 7


def round_fixed(value: float, places: int) -> float:
    """Round to a fixed number of decimals, ties away from zero.

    Works on the exact binary value of the float, so ``0.0625`` rounds to
    ``0.063`` where the built-in ``round`` would give ``0.062``.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    result = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    return result + 0.0  # normalise -0.0


def round_px(value: float) -> int:
    """Round to a whole pixel, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Shortest plain-decimal text for a number: ``1``, ``1.25``, ``0.004808``."""
    if value == int(value):
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        text = f"{value:.12f}".rstrip("0").rstrip(".")
    return text


def new_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def to_rem(px: float, base: float) -> float:
    return round_fixed(px / base, 3)


def ratio_from(lh: float, font_px: float) -> float:
    """Normalise a line-height to a unitless ratio.

    Values up to 3 are already ratios; anything larger is a pixel line-height.
    """
    if lh <= 3:
        return round_fixed(lh, 3)
    return round_fixed(lh / font_px, 3)


def slope_rem_per_vw(rem_a: float, rem_b: float, px_a: float, px_b: float, base: float) -> float:
    """Rate of change in rem per 1vw between two (width, rem) points."""
    if px_a == px_b:
        return 0.0
    return round_fixed(((rem_b - rem_a) * base * 100) / (px_b - px_a), 6)


def intercept_rem(rem_at_a: float, slope_vw: float, px_a: float, base: float) -> float:
    """Rem term of ``<intercept>rem + <slope>vw`` that equals ``rem_at_a`` at ``px_a``."""
    if slope_vw == 0:
        return round_fixed(rem_at_a, 6)
    return round_fixed(rem_at_a - (slope_vw * (px_a / 100)) / base, 6)
