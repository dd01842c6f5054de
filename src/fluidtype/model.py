"""Token/breakpoint model exchanged between the HTTP layer, generator and importer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator

from .errors import InvalidModelError
from .typomath import format_number, new_id

if TYPE_CHECKING:
    from .importer import ImportResult

DEFAULT_BASE_REM_PX = 16.0
DEFAULT_SIZE_PX = 16.0
DEFAULT_LINE_HEIGHT = 1.25


class Breakpoint(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    label: str = ""
    value: float = Field(gt=0)


class Token(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(default_factory=new_id)
    name: str
    sizes: dict[str, PositiveFloat] = Field(default_factory=dict)
    lh: dict[str, PositiveFloat] = Field(default_factory=dict)
    grow_factor_lg: float = 1.0


def default_breakpoints() -> list[Breakpoint]:
    return [
        Breakpoint(id="min", label="375", value=375),
        Breakpoint(id="mid", label="1024", value=1024),
        Breakpoint(id="max", label="1440", value=1440),
    ]


class TypographyModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    base_rem_px: float = Field(default=DEFAULT_BASE_REM_PX, gt=0)
    breakpoints: list[Breakpoint] = Field(default_factory=default_breakpoints)
    tokens: list[Token] = Field(default_factory=list)

    @field_validator("breakpoints")
    @classmethod
    def _unique_breakpoint_ids(cls, value: list[Breakpoint]) -> list[Breakpoint]:
        seen = set()
        for bp in value:
            if bp.id in seen:
                raise ValueError(f"duplicate breakpoint id: {bp.id}")
            seen.add(bp.id)
        return value

    def sorted_breakpoints(self) -> list[Breakpoint]:
        return sorted(self.breakpoints, key=lambda bp: bp.value)

    def calibration(self) -> tuple[Breakpoint, Breakpoint, Breakpoint]:
        """Return the (min, mid, max) breakpoints used to calibrate every token."""
        ordered = self.sorted_breakpoints()
        if len(ordered) < 2:
            raise InvalidModelError("At least 2 breakpoints are required")
        return ordered[0], ordered[(len(ordered) - 1) // 2], ordered[-1]

    def find_token(self, token_id: str) -> Token | None:
        return next((t for t in self.tokens if t.id == token_id), None)

    def add_token(self, name: str) -> Token:
        token = Token(
            name=name,
            sizes={bp.id: DEFAULT_SIZE_PX for bp in self.breakpoints},
            lh={bp.id: DEFAULT_LINE_HEIGHT for bp in self.breakpoints},
        )
        self.tokens.append(token)
        return token

    def remove_token(self, token_id: str) -> bool:
        before = len(self.tokens)
        self.tokens = [t for t in self.tokens if t.id != token_id]
        return len(self.tokens) != before

    def add_breakpoint(self, value: float, breakpoint_id: str | None = None) -> Breakpoint:
        """Add a breakpoint and seed every token's cells at it with the defaults."""
        existing = {bp.id for bp in self.breakpoints}
        if breakpoint_id is None:
            breakpoint_id = f"bp{len(self.breakpoints) + 1}"
            while breakpoint_id in existing:
                breakpoint_id = f"{breakpoint_id}_"
        elif breakpoint_id in existing:
            raise InvalidModelError(f"Breakpoint id already exists: {breakpoint_id}")
        bp = Breakpoint(id=breakpoint_id, label=format_number(value), value=value)
        self.breakpoints.append(bp)
        for token in self.tokens:
            token.sizes.setdefault(bp.id, DEFAULT_SIZE_PX)
            token.lh.setdefault(bp.id, DEFAULT_LINE_HEIGHT)
        return bp

    def remove_breakpoint(self, breakpoint_id: str) -> bool:
        before = len(self.breakpoints)
        self.breakpoints = [bp for bp in self.breakpoints if bp.id != breakpoint_id]
        if len(self.breakpoints) == before:
            return False
        for token in self.tokens:
            token.sizes.pop(breakpoint_id, None)
            token.lh.pop(breakpoint_id, None)
        return True

    def replace(self, result: ImportResult) -> None:
        """Apply an import result: tokens always, breakpoints only when recovered."""
        self.tokens = list(result.tokens)
        if result.breakpoints is not None:
            self.breakpoints = list(result.breakpoints)
