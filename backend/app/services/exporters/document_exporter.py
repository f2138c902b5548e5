"""PDF report exporter.

Lays solutions out with PyMuPDF, one solution per page run: title,
description, then the optional sections selected in ExportOptions. The layout
is a single downward cursor measured in points; every emitted line is
word-wrapped to the usable width, and a line that would cross the bottom
margin starts a new page.
"""

from typing import List, Optional

import fitz  # PyMuPDF

from app.config import settings
from app.models import Architecture, ExportOptions, Orientation, PageSize, Solution
from app.utils.logging import logger
from .base_exporter import BaseExporter, ExportPayload, format_cost, format_date, format_number, status_label
from .solution_fields import decode_architecture, decode_recommendations, decode_services

MM = 72 / 25.4

MARGIN = 20 * MM
LINE_HEIGHT = 7 * MM
TITLE_LINE_HEIGHT = 10 * MM
INDENT = 5 * MM

FONT_REGULAR = "helv"
FONT_BOLD = "hebo"

TITLE_SIZE = 20
DESCRIPTION_SIZE = 12
HEADING_SIZE = 14
BODY_SIZE = 10

PAPER_NAMES = {
    PageSize.A4: "a4",
    PageSize.LETTER: "letter",
    PageSize.LEGAL: "legal",
}


def page_rect(page_size: PageSize, orientation: Orientation) -> fitz.Rect:
    name = PAPER_NAMES[page_size]
    if orientation == Orientation.LANDSCAPE:
        name += "-l"
    return fitz.paper_rect(name)


def wrap_text(text: str, fontname: str, fontsize: float, max_width: float) -> List[str]:
    """Greedy word wrap; words wider than the line are split by character.

    Always returns at least one line, so empty text still occupies a line.
    """
    def width(s: str) -> float:
        return fitz.get_text_length(s, fontname=fontname, fontsize=fontsize)

    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if width(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            while width(word) > max_width and len(word) > 1:
                cut = len(word) - 1
                while cut > 1 and width(word[:cut]) > max_width:
                    cut -= 1
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines or [""]


class PdfLayout:
    """Cursor-driven page writer for a single export call."""

    def __init__(self, rect: fitz.Rect):
        self.doc = fitz.open()
        self.rect = rect
        self.page: Optional[fitz.Page] = None
        self.y = MARGIN

    @property
    def content_width(self) -> float:
        return self.rect.width - MARGIN * 2

    @property
    def bottom(self) -> float:
        return self.rect.height - MARGIN

    def new_page(self) -> None:
        self.page = self.doc.new_page(width=self.rect.width, height=self.rect.height)
        self.y = MARGIN

    def move(self, distance: float) -> None:
        self.y += distance

    def line(self, text: str, fontname: str, fontsize: float, x: float, advance: float) -> None:
        if self.page is None or self.y > self.bottom:
            self.new_page()
        self.page.insert_text(fitz.Point(x, self.y), text, fontname=fontname, fontsize=fontsize)
        self.y += advance

    def block(
        self,
        text: str,
        fontname: str = FONT_REGULAR,
        fontsize: float = BODY_SIZE,
        indent: float = 0,
        width_reduction: float = 0,
        line_height: float = LINE_HEIGHT,
    ) -> int:
        """Write wrapped text and return the number of lines it took."""
        lines = wrap_text(text, fontname, fontsize, self.content_width - width_reduction)
        for line in lines:
            self.line(line, fontname, fontsize, MARGIN + indent, line_height)
        return len(lines)

    def heading(self, text: str) -> None:
        self.line(text, FONT_BOLD, HEADING_SIZE, MARGIN, LINE_HEIGHT * 1.5)

    def to_bytes(self) -> bytes:
        data = self.doc.tobytes(garbage=3, deflate=True)
        self.doc.close()
        return data


class DocumentExporter(BaseExporter):
    """
    Exporter for PDF reports.

    Honors every section flag in ExportOptions:
    - include_details: status, cost estimate and creation date
    - include_architecture: component and connection listing
    - include_recommendations: numbered recommendation list
    - include_cost_analysis: monthly and annual projection
    The AWS services section is always emitted when the solution has services.
    """

    content_type = "application/pdf"
    extension = "pdf"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        layout = PdfLayout(page_rect(options.page_size, options.orientation))
        layout.doc.set_metadata({
            "title": solutions[0].title if len(solutions) == 1 else f"{len(solutions)} solutions",
            "creator": settings.export_generator,
            "producer": settings.export_generator,
        })

        for solution in solutions:
            # Every solution starts on its own page
            layout.new_page()
            self.add_solution(layout, solution, options)

        page_count = layout.doc.page_count
        data = layout.to_bytes()
        logger.info("Rendered PDF report", extra={
            "solutions": len(solutions),
            "pages": page_count,
            "page_size": options.page_size.value,
            "orientation": options.orientation.value,
        })
        return ExportPayload(data, self.dated_filename("solutions"), self.content_type)

    def add_solution(self, layout: PdfLayout, solution: Solution, options: ExportOptions) -> None:
        layout.block(solution.title, FONT_BOLD, TITLE_SIZE, line_height=TITLE_LINE_HEIGHT)
        layout.move(LINE_HEIGHT * 2 - TITLE_LINE_HEIGHT)

        layout.block(solution.description, FONT_REGULAR, DESCRIPTION_SIZE)
        layout.move(10 * MM)

        if options.include_details:
            self.add_details(layout, solution)

        self.add_services(layout, solution)

        if options.include_architecture:
            self.add_architecture(layout, decode_architecture(solution))

        if options.include_recommendations:
            self.add_recommendations(layout, decode_recommendations(solution))

        if options.include_cost_analysis:
            self.add_cost_analysis(layout, solution.cost_estimate)

    def add_details(self, layout: PdfLayout, solution: Solution) -> None:
        layout.heading("Solution Details")
        layout.block(f"Status: {status_label(solution)}")
        layout.block(f"Cost Estimate: ${format_cost(solution.cost_estimate)}/month")
        layout.block(f"Created: {format_date(solution.created_at)}")
        layout.move(5 * MM)

    def add_services(self, layout: PdfLayout, solution: Solution) -> None:
        services = decode_services(solution)
        if not services:
            return

        layout.heading("AWS Services")
        for service in services:
            layout.block(f"• {service.name}", FONT_BOLD)
            layout.block(f"Purpose: {service.purpose}", indent=INDENT, width_reduction=2 * INDENT)
            layout.block(f"Configuration: {service.configuration}", indent=INDENT, width_reduction=2 * INDENT)
            layout.move(3 * MM)
        layout.move(5 * MM)

    def add_architecture(self, layout: PdfLayout, architecture: Optional[Architecture]) -> None:
        if architecture is None or not architecture.components:
            return

        names = {component.id: component.name or component.id for component in architecture.components}
        layout.heading("Architecture")
        for component in architecture.components:
            label = f"• {component.name} ({component.type})" if component.type else f"• {component.name}"
            layout.block(label)

        if architecture.connections:
            layout.move(2 * MM)
            layout.block("Connections", FONT_BOLD)
            for connection in architecture.connections:
                source = names.get(connection.from_id, connection.from_id)
                target = names.get(connection.to_id, connection.to_id)
                suffix = f": {connection.label}" if connection.label else ""
                layout.block(f"{source} -> {target}{suffix}", indent=INDENT, width_reduction=2 * INDENT)
        layout.move(5 * MM)

    def add_recommendations(self, layout: PdfLayout, recommendations: List[str]) -> None:
        if not recommendations:
            return

        layout.heading("Recommendations")
        for index, rec in enumerate(recommendations, start=1):
            layout.block(f"{index}. {rec}")
            layout.move(2 * MM)
        layout.move(3 * MM)

    def add_cost_analysis(self, layout: PdfLayout, cost_estimate: Optional[float]) -> None:
        layout.heading("Cost Analysis")
        if cost_estimate is None:
            layout.block("Cost estimate not available")
            return
        layout.block(f"Estimated monthly cost: ${format_number(cost_estimate)}")
        layout.block(f"Projected annual cost: ${format_number(round(cost_estimate * 12, 2))}")
