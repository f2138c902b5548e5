"""Server-side stand-in for the rendered architecture diagram.

The export dialog captures whatever diagram is on screen. Here the same
drawing is produced from a solution's decoded architecture: 128x64 component
cards at their stored positions, labelled connection lines between card
anchors, on a white canvas with a light grid. The element exposes its
bounding box, a native SVG drawing (what gets rasterized) and the XHTML
subtree (what the SVG export wraps in a foreignObject).
"""

import math
import xml.etree.ElementTree as ET
from typing import Iterable, List, NamedTuple, Optional, Tuple

from app.models import Architecture, ArchitectureComponent, Solution
from .solution_fields import decode_architecture

SVG_NS = "http://www.w3.org/2000/svg"
XHTML_NS = "http://www.w3.org/1999/xhtml"

COMPONENT_WIDTH = 128
COMPONENT_HEIGHT = 64
ANCHOR_OFFSET = (60, 30)
CANVAS_MIN_WIDTH = 800
CANVAS_MIN_HEIGHT = 384
CANVAS_PADDING = 40
GRID_SIZE = 20
LABEL_MAX_CHARS = 8

CANVAS_BACKGROUND = "#f9fafb"
GRID_COLOR = "#e5e7eb"
LINE_COLOR = "#6b7280"
LABEL_TEXT_COLOR = "#4b5563"
FONT_FAMILY = "Helvetica, Arial, sans-serif"


class CardStyle(NamedTuple):
    fill: str
    border: str
    text: str


# First matching keyword wins
TYPE_STYLES: List[Tuple[str, CardStyle]] = [
    ("database", CardStyle("#ffedd5", "#fdba74", "#9a3412")),
    ("storage", CardStyle("#dcfce7", "#86efac", "#166534")),
    ("compute", CardStyle("#dbeafe", "#93c5fd", "#1e40af")),
    ("function", CardStyle("#f3e8ff", "#d8b4fe", "#6b21a8")),
    ("gateway", CardStyle("#e0e7ff", "#a5b4fc", "#3730a3")),
    ("cache", CardStyle("#fee2e2", "#fca5a5", "#991b1b")),
]
DEFAULT_STYLE = CardStyle("#f3f4f6", "#d1d5db", "#1f2937")


def style_for(component_type: str) -> CardStyle:
    t = component_type.lower()
    for keyword, style in TYPE_STYLES:
        if keyword in t:
            return style
    return DEFAULT_STYLE


def short_label(label: str) -> str:
    return label[:LABEL_MAX_CHARS] + "..." if len(label) > LABEL_MAX_CHARS else label


class Segment(NamedTuple):
    start: Tuple[float, float]
    end: Tuple[float, float]
    label: str


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


class ArchitectureDiagram:
    """A drawable architecture diagram handle used by image export."""

    def __init__(self, architecture: Architecture, solution_id: Optional[str] = None):
        self.architecture = architecture
        self.solution_id = solution_id

    @property
    def components(self) -> List[ArchitectureComponent]:
        return self.architecture.components

    def bounding_box(self) -> Tuple[float, float]:
        """(width, height) of the canvas, grown to fit every card."""
        width, height = CANVAS_MIN_WIDTH, CANVAS_MIN_HEIGHT
        for component in self.components:
            width = max(width, component.position.x + COMPONENT_WIDTH + CANVAS_PADDING)
            height = max(height, component.position.y + COMPONENT_HEIGHT + CANVAS_PADDING)
        return float(width), float(height)

    def segments(self) -> List[Segment]:
        """Connection lines between card anchors; dangling connections are skipped."""
        by_id = {component.id: component for component in self.components}
        result = []
        for connection in self.architecture.connections:
            source = by_id.get(connection.from_id)
            target = by_id.get(connection.to_id)
            if source is None or target is None:
                continue
            result.append(Segment(self._anchor(source), self._anchor(target), connection.label))
        return result

    @staticmethod
    def _anchor(component: ArchitectureComponent) -> Tuple[float, float]:
        return (component.position.x + ANCHOR_OFFSET[0], component.position.y + ANCHOR_OFFSET[1])

    # ---------- Native SVG ----------
    def to_svg(self) -> str:
        width, height = self.bounding_box()
        svg = ET.Element("svg", {
            "xmlns": SVG_NS,
            "width": _fmt(width),
            "height": _fmt(height),
            "viewBox": f"0 0 {_fmt(width)} {_fmt(height)}",
        })
        ET.SubElement(svg, "rect", {"x": "0", "y": "0", "width": _fmt(width), "height": _fmt(height), "fill": CANVAS_BACKGROUND})
        self._draw_grid(svg, width, height)
        for segment in self.segments():
            self._draw_segment(svg, segment)
        for component in self.components:
            self._draw_card(svg, component)
        return ET.tostring(svg, encoding="unicode")

    @staticmethod
    def _draw_grid(svg: ET.Element, width: float, height: float) -> None:
        grid = ET.SubElement(svg, "g", {"stroke": GRID_COLOR, "stroke-width": "1", "opacity": "0.2"})
        for x in _steps(width):
            ET.SubElement(grid, "line", {"x1": _fmt(x), "y1": "0", "x2": _fmt(x), "y2": _fmt(height)})
        for y in _steps(height):
            ET.SubElement(grid, "line", {"x1": "0", "y1": _fmt(y), "x2": _fmt(width), "y2": _fmt(y)})

    @staticmethod
    def _draw_segment(svg: ET.Element, segment: Segment) -> None:
        (x1, y1), (x2, y2) = segment.start, segment.end
        group = ET.SubElement(svg, "g")
        ET.SubElement(group, "line", {
            "x1": _fmt(x1), "y1": _fmt(y1), "x2": _fmt(x2), "y2": _fmt(y2),
            "stroke": LINE_COLOR, "stroke-width": "2",
        })
        if (x1, y1) != (x2, y2):
            ET.SubElement(group, "polygon", {"points": _arrowhead(x1, y1, x2, y2), "fill": LINE_COLOR})

        mid_x, mid_y = (x1 + x2) / 2, (y1 + y2) / 2
        ET.SubElement(group, "rect", {
            "x": _fmt(mid_x - 20), "y": _fmt(mid_y - 8), "width": "40", "height": "16",
            "rx": "8", "fill": "#ffffff", "stroke": GRID_COLOR,
        })
        text = ET.SubElement(group, "text", {
            "x": _fmt(mid_x), "y": _fmt(mid_y + 4), "text-anchor": "middle",
            "font-family": FONT_FAMILY, "font-size": "10", "fill": LABEL_TEXT_COLOR,
        })
        text.text = short_label(segment.label)

    @staticmethod
    def _draw_card(svg: ET.Element, component: ArchitectureComponent) -> None:
        style = style_for(component.type)
        x, y = component.position.x, component.position.y
        group = ET.SubElement(svg, "g", {"data-component-id": component.id})
        ET.SubElement(group, "rect", {
            "x": _fmt(x), "y": _fmt(y),
            "width": str(COMPONENT_WIDTH), "height": str(COMPONENT_HEIGHT),
            "rx": "8", "fill": style.fill, "stroke": style.border, "stroke-width": "2",
        })
        name = ET.SubElement(group, "text", {
            "x": _fmt(x + COMPONENT_WIDTH / 2), "y": _fmt(y + COMPONENT_HEIGHT / 2 - 2),
            "text-anchor": "middle", "font-family": FONT_FAMILY,
            "font-size": "12", "font-weight": "bold", "fill": style.text,
        })
        name.text = component.name
        kind = ET.SubElement(group, "text", {
            "x": _fmt(x + COMPONENT_WIDTH / 2), "y": _fmt(y + COMPONENT_HEIGHT / 2 + 14),
            "text-anchor": "middle", "font-family": FONT_FAMILY, "font-size": "9", "fill": style.text,
        })
        kind.text = component.type

    # ---------- XHTML subtree ----------
    def to_xhtml(self) -> ET.Element:
        """The diagram as the browser would render it: positioned divs over an inline SVG layer."""
        width, height = self.bounding_box()
        root = ET.Element("div", {
            "xmlns": XHTML_NS,
            "data-architecture-canvas": self.solution_id or "",
            "style": (
                f"position: relative; width: {_fmt(width)}px; height: {_fmt(height)}px; "
                f"background: {CANVAS_BACKGROUND}; overflow: hidden; font-family: {FONT_FAMILY};"
            ),
        })
        layer = ET.SubElement(root, "svg", {
            "xmlns": SVG_NS,
            "width": _fmt(width),
            "height": _fmt(height),
            "style": "position: absolute; left: 0; top: 0;",
        })
        for segment in self.segments():
            self._draw_segment(layer, segment)

        for component in self.components:
            style = style_for(component.type)
            card = ET.SubElement(root, "div", {
                "data-component-id": component.id,
                "style": (
                    f"position: absolute; left: {_fmt(component.position.x)}px; top: {_fmt(component.position.y)}px; "
                    f"width: {COMPONENT_WIDTH}px; height: {COMPONENT_HEIGHT}px; border-radius: 8px; "
                    f"border: 2px solid {style.border}; background: {style.fill}; color: {style.text}; "
                    "display: flex; align-items: center; justify-content: center; text-align: center; font-size: 12px;"
                ),
            })
            label = ET.SubElement(card, "div")
            label.text = component.name
        return root


def _steps(limit: float) -> Iterable[float]:
    value = GRID_SIZE
    while value < limit:
        yield value
        value += GRID_SIZE


def _arrowhead(x1: float, y1: float, x2: float, y2: float, length: float = 10, half_width: float = 3.5) -> str:
    angle = math.atan2(y2 - y1, x2 - x1)
    back_x, back_y = x2 - length * math.cos(angle), y2 - length * math.sin(angle)
    off_x, off_y = half_width * math.sin(angle), half_width * math.cos(angle)
    points = [(x2, y2), (back_x + off_x, back_y - off_y), (back_x - off_x, back_y + off_y)]
    return " ".join(f"{_fmt(round(px, 2))},{_fmt(round(py, 2))}" for px, py in points)


def resolve_diagram(solutions: List[Solution], solution_id: Optional[str]) -> Optional[ArchitectureDiagram]:
    """Look up the diagram currently displayed for `solution_id`.

    Returns None when the id is missing, unknown, or its architecture has no
    components to draw.
    """
    if not solution_id:
        return None
    for solution in solutions:
        if solution.id != solution_id:
            continue
        architecture = decode_architecture(solution)
        if architecture is None or not architecture.components:
            return None
        return ArchitectureDiagram(architecture, solution_id=solution.id)
    return None
