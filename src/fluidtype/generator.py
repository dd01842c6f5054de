"""Custom-property generator.

Each token becomes a ``--name`` / ``--name-lh`` pair whose value follows a
piecewise-linear function of the viewport width:

* below the mid breakpoint: clamp between the min and mid sizes
* between mid and max: clamp between the mid and max sizes
* above max: unbounded growth at the mid-to-max rate, scaled by the token's
  growth factor

The unconditional declaration carries the max size so the largest layout is
the fallback. The importer reads this text back with regular expressions, so
the layout and number formatting here are a contract.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .errors import InvalidModelError
from .model import Token, TypographyModel
from .typomath import (
    format_number,
    intercept_rem,
    ratio_from,
    round_fixed,
    slope_rem_per_vw,
    to_rem,
)

HEADER = "/*\n * fluid typography\n * generated by fluidtype\n */\n"


class GeneratedCss(NamedTuple):
    properties: str
    mixins: str


@dataclass(frozen=True)
class TokenScale:
    """Rounded coefficients for one token, exactly as they are written out."""

    name: str
    base_rem_px: float
    min_px: float
    mid_px: float
    max_px: float
    s_min: float
    s_mid: float
    s_max: float
    lh_min: float
    lh_mid: float
    lh_max: float
    slope_small: float
    intercept_small: float
    slope_mid: float
    intercept_mid: float
    slope_beyond: float
    max_rem_width: float
    grow_factor: float

    def _fluid(self, intercept: float, slope: float, width_px: float) -> float:
        return intercept + slope * width_px / (100 * self.base_rem_px)

    def size_at(self, width_px: float) -> float:
        """Evaluate the generated CSS at a viewport width, in rem."""
        if width_px <= self.mid_px - 1:
            low, high = sorted((self.s_min, self.s_mid))
            return min(max(self._fluid(self.intercept_small, self.slope_small, width_px), low), high)
        if width_px <= self.max_px:
            low, high = sorted((self.s_mid, self.s_max))
            return min(max(self._fluid(self.intercept_mid, self.slope_mid, width_px), low), high)
        beyond = width_px / self.base_rem_px - self.max_rem_width
        return self.s_max + self.slope_beyond * beyond * self.grow_factor

    def line_height_at(self, width_px: float) -> float:
        if width_px <= self.mid_px - 1:
            return self.lh_min
        if width_px <= self.max_px:
            return self.lh_mid
        return self.lh_max


def _required(values: dict[str, float], key: str, token: Token, what: str) -> float:
    try:
        return values[key]
    except KeyError:
        raise InvalidModelError(f"Token '{token.name}' has no {what} for breakpoint '{key}'") from None


def compute_scale(
    token: Token,
    base_rem_px: float,
    sorted_breakpoint_ids: Sequence[str],
    sorted_breakpoint_px: Sequence[float],
) -> TokenScale:
    n = len(sorted_breakpoint_ids)
    if n < 2 or len(sorted_breakpoint_px) != n:
        raise InvalidModelError("At least 2 breakpoints are required")
    if base_rem_px <= 0:
        raise InvalidModelError("baseRemPx must be greater than 0")

    mid_index = (n - 1) // 2
    min_id, mid_id, max_id = sorted_breakpoint_ids[0], sorted_breakpoint_ids[mid_index], sorted_breakpoint_ids[-1]
    min_px, mid_px, max_px = sorted_breakpoint_px[0], sorted_breakpoint_px[mid_index], sorted_breakpoint_px[-1]

    size_min = _required(token.sizes, min_id, token, "size")
    size_mid = _required(token.sizes, mid_id, token, "size")
    size_max = _required(token.sizes, max_id, token, "size")
    for key, size in ((min_id, size_min), (mid_id, size_mid), (max_id, size_max)):
        if not math.isfinite(size) or size <= 0:
            raise InvalidModelError(f"Token '{token.name}' size at breakpoint '{key}' must be greater than 0")

    s_min = to_rem(size_min, base_rem_px)
    s_mid = to_rem(size_mid, base_rem_px)
    s_max = to_rem(size_max, base_rem_px)

    lh_min = ratio_from(_required(token.lh, min_id, token, "line-height"), size_min)
    lh_mid = ratio_from(_required(token.lh, mid_id, token, "line-height"), size_mid)
    lh_max = ratio_from(_required(token.lh, max_id, token, "line-height"), size_max)

    slope_small = slope_rem_per_vw(s_min, s_mid, min_px, mid_px, base_rem_px)
    slope_mid = slope_rem_per_vw(s_mid, s_max, mid_px, max_px, base_rem_px)

    denom = (max_px - mid_px) / base_rem_px
    slope_beyond = 0.0 if denom == 0 else round_fixed((s_max - s_mid) / denom, 6)

    return TokenScale(
        name=token.name,
        base_rem_px=base_rem_px,
        min_px=min_px,
        mid_px=mid_px,
        max_px=max_px,
        s_min=s_min,
        s_mid=s_mid,
        s_max=s_max,
        lh_min=lh_min,
        lh_mid=lh_mid,
        lh_max=lh_max,
        slope_small=slope_small,
        intercept_small=intercept_rem(s_min, slope_small, min_px, base_rem_px),
        slope_mid=slope_mid,
        intercept_mid=intercept_rem(s_mid, slope_mid, mid_px, base_rem_px),
        slope_beyond=slope_beyond,
        max_rem_width=round_fixed(max_px / base_rem_px, 3),
        grow_factor=token.grow_factor_lg,
    )


def _clamp(a: float, b: float, intercept: float, slope: float) -> str:
    f = format_number
    return f"clamp({f(min(a, b))}rem, {f(intercept)}rem + {f(slope)}vw, {f(max(a, b))}rem)"


def _media_block(query: str, lines: list[str]) -> str:
    return "\n".join([f"@media {query} {{", "\t:root {", *lines, "\t}", "}"])


def generate(
    tokens: Sequence[Token],
    base_rem_px: float,
    sorted_breakpoint_ids: Sequence[str],
    sorted_breakpoint_px: Sequence[float],
) -> GeneratedCss:
    """Compile tokens into custom-property CSS and matching mixins."""
    if len(sorted_breakpoint_ids) < 2:
        raise InvalidModelError("At least 2 breakpoints are required")
    if not tokens:
        raise InvalidModelError("There are no tokens to generate")

    f = format_number
    base_lines = [HEADER + ":root {"]
    mid_lines: list[str] = []
    small_lines: list[str] = []
    large_lines: list[str] = []
    mixin_lines: list[str] = []
    seen: set[str] = set()

    for token in tokens:
        if not token.name:
            raise InvalidModelError("Token name must not be empty")
        if token.name in seen:
            raise InvalidModelError(f"Duplicate token name: {token.name}")
        seen.add(token.name)

        s = compute_scale(token, base_rem_px, sorted_breakpoint_ids, sorted_breakpoint_px)
        name = token.name

        base_lines.append(f"\t--{name}: {f(s.s_max)}rem;")
        base_lines.append(f"\t--{name}-lh: {f(s.lh_max)};")

        mid_lines.append(f"\t\t--{name}: {_clamp(s.s_mid, s.s_max, s.intercept_mid, s.slope_mid)};")
        mid_lines.append(f"\t\t--{name}-lh: {f(s.lh_mid)};")

        small_lines.append(f"\t\t--{name}: {_clamp(s.s_min, s.s_mid, s.intercept_small, s.slope_small)};")
        small_lines.append(f"\t\t--{name}-lh: {f(s.lh_min)};")

        large_lines.append(
            f"\t\t--{name}: calc({f(s.s_max)}rem + "
            f"({f(s.slope_beyond)} * (100vw - {f(s.max_rem_width)}rem) * {f(s.grow_factor)}));"
        )

        mixin_lines.append(f"@define-mixin font-{name} {{")
        mixin_lines.append(f"\tfont-size: var(--{name});")
        mixin_lines.append(f"\tline-height: var(--{name}-lh);")
        mixin_lines.append("}\n")

    base_lines.append("}")

    mid_index = (len(sorted_breakpoint_px) - 1) // 2
    mid_px = sorted_breakpoint_px[mid_index]
    max_px = sorted_breakpoint_px[-1]

    properties = "\n\n".join([
        "\n".join(base_lines),
        _media_block(f"(min-width: {f(mid_px)}px) and (max-width: {f(max_px)}px)", mid_lines),
        _media_block(f"(max-width: {f(mid_px - 1)}px)", small_lines),
        _media_block(f"(min-width: {f(max_px + 1)}px)", large_lines),
    ])
    return GeneratedCss(properties=properties, mixins="\n".join(mixin_lines))


def generate_model(model: TypographyModel) -> GeneratedCss:
    ordered = model.sorted_breakpoints()
    if len(ordered) < 2:
        raise InvalidModelError("At least 2 breakpoints are required")
    return generate(
        model.tokens,
        model.base_rem_px,
        [bp.id for bp in ordered],
        [bp.value for bp in ordered],
    )
