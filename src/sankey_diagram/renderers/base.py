"""Output backend interface accepted by ``render_svg`` and ``save_svg``."""

from __future__ import annotations

from typing import Protocol

from sankey_diagram.layout.types import LayoutResult


class Renderer(Protocol):
    """Anything that turns a finished layout into document text.

    Renderers read node boxes, ribbon outlines and the resolved style from
    the ``LayoutResult``; they never re-run layout.
    """

    def render(self, result: LayoutResult) -> str: ...
