"""Import stylesheet text written in the generator's convention back into tokens.

This is pattern matching over a narrow dialect, not a CSS parser. Anything the
text leaves out is filled from the next best value, so a hand-written legacy
stylesheet still yields an editable model.
"""

import logging
import math
import re
from dataclasses import dataclass

from .errors import MalformedInputError
from .model import Breakpoint, Token
from .typomath import round_px

logger = logging.getLogger(__name__)

DEFAULT_MIN_PX = 375
MIN_PX_FLOOR = 320
DEFAULT_SIZE_PX = 16
DEFAULT_LINE_HEIGHT = 1.25

ROOT_BLOCK_RE = re.compile(r":root\s*\{([\s\S]*?)\}")
MEDIA_MARKER_RE = re.compile(r"@media", re.IGNORECASE)
COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
DECL_RE = re.compile(r"--([a-z0-9_-]+)\s*:\s*([^;]+);", re.IGNORECASE)

_MEDIA_PREFIX = r"@media\s*(?:screen\s+and\s+)?"
TWO_SIDED_RE = re.compile(
    _MEDIA_PREFIX + r"\(min-width:\s*(\d+)px\)\s*and\s*\(max-width:\s*(\d+)px\)\s*\{([\s\S]*?)\}",
    re.IGNORECASE,
)
MAX_ONLY_RE = re.compile(_MEDIA_PREFIX + r"\(max-width:\s*(\d+)px\)\s*\{([\s\S]*?)\}", re.IGNORECASE)
MIN_ONLY_RE = re.compile(_MEDIA_PREFIX + r"\(min-width:\s*(\d+)px\)\s*\{([\s\S]*?)\}", re.IGNORECASE)

REM_RE = re.compile(r"([\d.]+)\s*rem\b", re.IGNORECASE)
CLAMP_FIRST_RE = re.compile(r"clamp\(\s*([\d.]+)rem", re.IGNORECASE)
CLAMP_LAST_RE = re.compile(r"clamp\([^,]+,[^,]+,\s*([\d.]+)rem\s*\)", re.IGNORECASE)
GROW_FACTOR_RE = re.compile(r"\(100vw\s*-\s*[\d.]+rem\)\s*\*\s*([\d.]+)", re.IGNORECASE)
LEADING_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)", re.IGNORECASE)


@dataclass
class ImportResult:
    tokens: list[Token]
    breakpoints: list[Breakpoint] | None = None


def _to_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _positive(value: float | None) -> float | None:
    return value if value is not None and value > 0 else None


def _leading_number(text: str | None) -> float | None:
    """Numeric prefix of a value, ``None`` when it does not start with a number."""
    if not text:
        return None
    m = LEADING_NUMBER_RE.match(text)
    return _to_float(m.group(1)) if m else None


def _search_number(pattern: re.Pattern, text: str | None) -> float | None:
    if not text:
        return None
    m = pattern.search(text)
    return _to_float(m.group(1)) if m else None


def parse_declarations(block: str) -> dict[str, str]:
    """Collect ``--name: value;`` pairs; a repeated name keeps its last value."""
    return {m.group(1): m.group(2).strip() for m in DECL_RE.finditer(block)}


def _root_declarations(css: str) -> dict[str, str]:
    m = ROOT_BLOCK_RE.search(css)
    if not m:
        raise MalformedInputError("No :root block found")
    body = m.group(1)
    marker = MEDIA_MARKER_RE.search(body)
    if marker:
        body = body[:marker.start()]
    return parse_declarations(COMMENT_RE.sub("", body))


def _reconstruct_breakpoints(small_max: int, mid_min: int, mid_max: int) -> list[Breakpoint]:
    min_px = min(DEFAULT_MIN_PX, small_max)
    if min_px >= mid_min:
        min_px = max(MIN_PX_FLOOR, min(DEFAULT_MIN_PX, mid_min - 1))
    return [
        Breakpoint(id="min", label=str(min_px), value=min_px),
        Breakpoint(id="mid", label=str(mid_min), value=mid_min),
        Breakpoint(id="max", label=str(mid_max), value=mid_max),
    ]


def parse(css: str, base_rem_px: float) -> ImportResult:
    """Recover tokens (and breakpoints, when the bands allow it) from CSS text."""
    decl_root = _root_declarations(css)

    two_sided = sorted(TWO_SIDED_RE.finditer(css), key=lambda m: int(m.group(2)))
    small_one_sided = MAX_ONLY_RE.search(css)
    large_match = MIN_ONLY_RE.search(css)

    mid_match = two_sided[-1] if two_sided else None
    small_two_sided = two_sided[0] if two_sided else None

    mid_min = int(mid_match.group(1)) if mid_match else None
    mid_max = int(mid_match.group(2)) if mid_match else None

    if small_one_sided:
        small_max = int(small_one_sided.group(1))
        decl_small = parse_declarations(small_one_sided.group(2))
    elif small_two_sided:
        small_max = int(small_two_sided.group(2))
        decl_small = parse_declarations(small_two_sided.group(3))
    else:
        small_max = None
        decl_small = {}

    decl_mid = parse_declarations(mid_match.group(3)) if mid_match else {}
    decl_large = parse_declarations(large_match.group(2)) if large_match else {}

    logger.debug(
        "import bands: mid=%s small=%s large=%s",
        (mid_min, mid_max) if mid_match else None,
        small_max,
        large_match.group(1) if large_match else None,
    )

    breakpoints = None
    if small_max and mid_min and mid_max:
        breakpoints = _reconstruct_breakpoints(small_max, mid_min, mid_max)

    def rem_to_px(rem: float) -> int:
        return round_px(rem * base_rem_px)

    tokens: dict[str, Token] = {}
    for name, base_value in decl_root.items():
        if name.endswith("-lh"):
            continue
        lh_name = f"{name}-lh"

        size_max_rem = _search_number(REM_RE, base_value)
        size_max_px = rem_to_px(size_max_rem) if size_max_rem else DEFAULT_SIZE_PX
        lh_max = _positive(_leading_number(decl_root.get(lh_name))) or DEFAULT_LINE_HEIGHT

        mid_value = decl_mid.get(name)
        small_value = decl_small.get(name)
        mid_rem = _search_number(CLAMP_FIRST_RE, mid_value)
        small_rem = _search_number(CLAMP_FIRST_RE, small_value)
        if not size_max_rem and mid_value:
            size_max_rem = _search_number(CLAMP_LAST_RE, mid_value)

        if mid_rem:
            size_mid_px = rem_to_px(mid_rem)
        elif size_max_rem:
            size_mid_px = rem_to_px(size_max_rem)
        else:
            size_mid_px = size_max_px
        size_small_px = rem_to_px(small_rem) if small_rem else size_mid_px

        lh_mid = _positive(_leading_number(decl_mid.get(lh_name))) or lh_max
        lh_small = _positive(_leading_number(decl_small.get(lh_name))) or lh_mid

        large_value = decl_large.get(name)
        grow = _search_number(GROW_FACTOR_RE, large_value) if large_value else None

        tokens[name] = Token(
            name=name,
            sizes={
                "min": size_small_px or DEFAULT_SIZE_PX,
                "mid": size_mid_px or DEFAULT_SIZE_PX,
                "max": size_max_px or DEFAULT_SIZE_PX,
            },
            lh={"min": lh_small, "mid": lh_mid, "max": lh_max},
            grow_factor_lg=grow if grow is not None else 1.0,
        )

    if not tokens:
        raise MalformedInputError("No tokens found in :root")

    return ImportResult(tokens=list(tokens.values()), breakpoints=breakpoints)
