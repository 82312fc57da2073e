"""Convenience entry points: graph in, layout or SVG out."""

from __future__ import annotations

import logging
from pathlib import Path

from sankey_diagram.graph import SankeyGraph
from sankey_diagram.layout import LayoutResult, full_layout
from sankey_diagram.renderers.base import Renderer
from sankey_diagram.renderers.svg import SvgRenderer
from sankey_diagram.style import SankeyStyle

logger = logging.getLogger(__name__)


def compute_layout(
    graph: SankeyGraph,
    width: float,
    height: float,
    style: SankeyStyle | None = None,
    strict: bool = False,
) -> LayoutResult:
    """Lay out ``graph`` on a ``width`` x ``height`` canvas."""
    return full_layout(graph, width, height, style, strict=strict)


def render_svg(
    graph: SankeyGraph,
    width: float,
    height: float,
    style: SankeyStyle | None = None,
    strict: bool = False,
    renderer: Renderer | None = None,
) -> str:
    """Lay out ``graph`` and render it, by default as an SVG document string.

    Any object with a ``render(result) -> str`` method can stand in for the
    default ``SvgRenderer``.
    """
    renderer = renderer or SvgRenderer()
    return renderer.render(compute_layout(graph, width, height, style, strict))


def save_svg(
    graph: SankeyGraph,
    path: str | Path,
    width: float,
    height: float,
    style: SankeyStyle | None = None,
    strict: bool = False,
    renderer: Renderer | None = None,
) -> Path:
    """Render ``graph`` and write the output to ``path``. Returns the path written."""
    out = Path(path)
    text = render_svg(graph, width, height, style, strict, renderer)
    out.write_text(text + "\n", encoding="utf-8")
    logger.info("wrote %s", out)
    return out
