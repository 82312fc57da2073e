"""SVG renderer: renders a LayoutResult to an SVG document string."""

from __future__ import annotations

from sankey_diagram.layout.types import LayoutEdge, LayoutNode, LayoutResult, PathCommand

# ─── Constants ──────────────────────────────────────────────────────────────

SVG_NS = "http://www.w3.org/2000/svg"
NODE_FILL = "#000F"
EDGE_FILL = "#0004"
TEXT_FILL = "#000F"

_STYLESHEET = """rect.node {{
  fill: {node_fill};
}}

text.node {{
  fill: {text_fill};
  text-anchor: middle;
  vertical-align: middle;
  font-size: {font_size}px;
}}

.edge > path {{
  fill: {edge_fill};
}}

.edge > text {{
  display: none;
  fill: {text_fill};
  text-anchor: middle;
  vertical-align: middle;
  font-size: {font_size}px;
}}

.edge:hover > text {{
  display: inline;
}}"""


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _num(value: float) -> str:
    """Compact coordinate: at most three decimals, no trailing zeros."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _fill(color: str | None) -> str:
    return f' style="fill:{_escape(color)}"' if color is not None else ""


def path_data(commands: list[PathCommand]) -> str:
    """Convert ribbon primitives to an SVG path ``d`` attribute."""
    parts: list[str] = []
    for cmd in commands:
        coords = " ".join(f"{_num(x)},{_num(y)}" for x, y in cmd.points)
        parts.append(f"{cmd.op}{coords}" if coords else cmd.op)
    return " ".join(parts)


# ─── Element Rendering ──────────────────────────────────────────────────────


def _render_node_box(ln: LayoutNode) -> str:
    return (
        f'<rect x="{_num(ln.x)}" y="{_num(ln.y)}" width="{_num(ln.width)}" '
        f'height="{_num(ln.height)}" class="node"{_fill(ln.color)}/>'
    )


def _render_node_label(ln: LayoutNode, font_size: float) -> str:
    cx, cy = ln.center
    x = _num(cx)
    if len(ln.text) == 1:
        body = _escape(ln.text[0])
    else:
        label, number = ln.text
        body = (
            f'<tspan x="{x}" dy="0">{_escape(label)}</tspan>'
            f'<tspan x="{x}" dy="{_num(font_size)}">{_escape(number)}</tspan>'
        )
    return f'<text x="{x}" y="{_num(cy)}" class="node">{body}</text>'


def _render_edge(le: LayoutEdge, font_size: float) -> str:
    mx, my = le.midpoint
    x = _num(mx)
    if len(le.text) == 1:
        body = _escape(le.text[0])
    else:
        label, number = le.text
        body = (
            f'<tspan x="{x}" dy="{_num(-font_size)}">{_escape(label)}</tspan>'
            f'<tspan x="{x}" dy="{_num(font_size)}">{_escape(number)}</tspan>'
        )
    return "\n".join(
        [
            '<g class="edge">',
            f'<path d="{path_data(le.path)}"{_fill(le.color)}/>',
            f'<text x="{x}" y="{_num(my)}">{body}</text>',
            "</g>",
        ]
    )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """Consumes a LayoutResult and produces an SVG string.

    Drawing order: node boxes, then ribbons from largest to smallest value,
    then node labels on top of everything.
    """

    def render(self, result: LayoutResult) -> str:
        font_size = result.style.font_size
        stylesheet = _STYLESHEET.format(
            node_fill=NODE_FILL,
            edge_fill=EDGE_FILL,
            text_fill=TEXT_FILL,
            font_size=_num(font_size),
        )

        parts = [
            f'<svg xmlns="{SVG_NS}" viewBox="0 0 {_num(result.width)} {_num(result.height)}">',
            f"<style>{stylesheet}</style>",
        ]

        for ln in result.nodes:
            parts.append(_render_node_box(ln))

        for le in result.edges_by_z_order():
            parts.append(_render_edge(le, font_size))

        for ln in result.nodes:
            parts.append(_render_node_label(ln, font_size))

        parts.append("</svg>")
        return "\n".join(parts)
