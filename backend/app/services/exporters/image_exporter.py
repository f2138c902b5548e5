"""Architecture diagram image exporter (PNG / SVG).

PNG rasterizes the diagram's native SVG drawing with PyMuPDF at the scale the
requested quality maps to, on an opaque white background. SVG wraps the
diagram's rendered XHTML subtree in a foreignObject sized to its bounding box.
"""

import xml.etree.ElementTree as ET
from typing import Dict

import fitz  # PyMuPDF

from app.models import ExportFormat, ExportOptions, ExportQuality
from app.utils.logging import logger
from .base_exporter import FILE_PREFIX, BaseExporter, ExportPayload, epoch_millis, format_number
from .diagram import SVG_NS, ArchitectureDiagram

QUALITY_SCALE: Dict[ExportQuality, float] = {
    ExportQuality.LOW: 1.0,
    ExportQuality.MEDIUM: 1.5,
    ExportQuality.HIGH: 2.0,
}

CONTENT_TYPES = {
    ExportFormat.PNG: "image/png",
    ExportFormat.SVG: "image/svg+xml",
}


class ImageExporter(BaseExporter):

    def render_image(
        self,
        element: ArchitectureDiagram,
        fmt: ExportFormat,
        options: ExportOptions
    ) -> ExportPayload:
        """
        Render the diagram element to a PNG or SVG payload.

        Args:
            element: Diagram currently displayed for the exported solution
            fmt: ExportFormat.PNG or ExportFormat.SVG
            options: Export options (only `quality` is read)

        Returns:
            ExportPayload with `vibesolver-architecture-{epochMillis}.{png|svg}`

        Raises:
            ValueError: For any non-image format
        """
        if fmt == ExportFormat.PNG:
            data = self.rasterize(element, QUALITY_SCALE[options.quality])
        elif fmt == ExportFormat.SVG:
            data = self.serialize_svg(element).encode("utf-8")
        else:
            raise ValueError(f"Not an image format: {fmt.value}")

        filename = f"{FILE_PREFIX}-architecture-{epoch_millis()}.{fmt.value}"
        return ExportPayload(data, filename, CONTENT_TYPES[fmt])

    def rasterize(self, element: ArchitectureDiagram, scale: float) -> bytes:
        svg = element.to_svg().encode("utf-8")
        with fitz.open(stream=svg, filetype="svg") as doc:
            pix = doc[0].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            logger.info("Rasterized architecture diagram", extra={
                "solution_id": element.solution_id,
                "scale": scale,
                "width": pix.width,
                "height": pix.height,
            })
            return pix.tobytes("png")

    def serialize_svg(self, element: ArchitectureDiagram) -> str:
        width, height = element.bounding_box()
        svg = ET.Element("svg", {
            "xmlns": SVG_NS,
            "width": format_number(width),
            "height": format_number(height),
        })
        foreign_object = ET.SubElement(svg, "foreignObject", {"width": "100%", "height": "100%"})
        foreign_object.append(element.to_xhtml())
        return ET.tostring(svg, encoding="unicode")
