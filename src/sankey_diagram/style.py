"""Style options for layout and rendering, with canvas-relative defaults."""

from __future__ import annotations

import decimal
import math
from collections.abc import Callable
from dataclasses import dataclass

NumberFormat = Callable[[float], str]

# Defaults are fractions of the canvas size.
NODE_SEPARATION_RATIO = 1 / 50  # of height
NODE_WIDTH_RATIO = 1 / 100  # of width
FONT_SIZE_RATIO = 1 / 50  # of height
BORDER_RATIO = 1 / 10  # of height


def format_number(value: float) -> str:
    """Plain decimal rendering: ``50000.0 -> "50000"``, ``0.1 -> "0.1"``."""
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return format(decimal.Decimal(repr(value)), "f")


@dataclass
class SankeyStyle:
    """Caller-facing style options. ``None`` means "use the default"."""

    number_format: NumberFormat | None = None
    node_separation: float | None = None
    node_width: float | None = None
    font_size: float | None = None
    border: float | None = None

    def resolve(self, width: float, height: float) -> ResolvedStyle:
        """Fill unset options from the canvas size."""
        return ResolvedStyle(
            number_format=self.number_format or format_number,
            node_separation=_pick(self.node_separation, height * NODE_SEPARATION_RATIO),
            node_width=_pick(self.node_width, width * NODE_WIDTH_RATIO),
            font_size=_pick(self.font_size, height * FONT_SIZE_RATIO),
            border=_pick(self.border, height * BORDER_RATIO),
        )


@dataclass(frozen=True)
class ResolvedStyle:
    """Style with every option set; produced by ``SankeyStyle.resolve``."""

    number_format: NumberFormat
    node_separation: float
    node_width: float
    font_size: float
    border: float


def _pick(value: float | None, default: float) -> float:
    return default if value is None else value
