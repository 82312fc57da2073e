from sankey_diagram.renderers.base import Renderer
from sankey_diagram.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
