"""Export facade: pick a renderer for the requested format, deliver the file, report the outcome.

Design choices:
- Dispatch is a closed chain over ExportFormat; CLOUDFORMATION stays declared but unsupported.
- Nothing a renderer raises escapes `export()`: failures come back as ExportResult(success=False).
- Input checks (format, diagram, empty selection) run before any rendering or delivery.
"""
from __future__ import annotations

from typing import List, Optional

from app.models import IMAGE_FORMATS, ExportFormat, ExportOptions, ExportResult, Solution
from app.services.delivery import Delivery, InMemoryDelivery, get_delivery
from app.services.exporters import (
    ArchitectureDiagram,
    DocumentExporter,
    ExportPayload,
    ImageExporter,
    JSONExporter,
    MarkdownExporter,
    TerraformExporter,
    YAMLExporter,
)
from app.utils.logging import logger
from app.utils.metrics import (
    EXPORT_BYTES_TOTAL,
    EXPORT_FAILURES,
    EXPORT_GENERATION_SECONDS,
    EXPORT_REQUESTS,
)

DIAGRAM_NOT_FOUND = "Architecture diagram not found"
NO_SOLUTIONS = "No solutions selected for export"

SUPPORTED_FORMATS = frozenset({
    ExportFormat.PDF,
    ExportFormat.PNG,
    ExportFormat.SVG,
    ExportFormat.JSON,
    ExportFormat.YAML,
    ExportFormat.MARKDOWN,
    ExportFormat.TERRAFORM,
})


class ExportService:
    def __init__(self, delivery: Optional[Delivery] = None):
        self.delivery = delivery if delivery is not None else InMemoryDelivery()
        self.document_exporter = DocumentExporter()
        self.image_exporter = ImageExporter()
        self.json_exporter = JSONExporter()
        self.yaml_exporter = YAMLExporter()
        self.markdown_exporter = MarkdownExporter()
        self.terraform_exporter = TerraformExporter()

    def export(
        self,
        solutions: List[Solution],
        options: ExportOptions,
        diagram: Optional[ArchitectureDiagram] = None,
    ) -> ExportResult:
        """
        Render `solutions` in `options.format` and deliver the file.

        Args:
            solutions: Solutions to export (read-only)
            options: Export options for this call
            diagram: Displayed architecture diagram; required for png/svg

        Returns:
            ExportResult with filename/data/location on success, error otherwise
        """
        fmt = options.format
        EXPORT_REQUESTS.labels(format=fmt.value).inc()

        if fmt not in SUPPORTED_FORMATS:
            return self._failure(fmt, "unsupported", f"Unsupported export format: {fmt.value}")
        if fmt in IMAGE_FORMATS:
            if diagram is None:
                return self._failure(fmt, "missing_input", DIAGRAM_NOT_FOUND)
        elif not solutions:
            return self._failure(fmt, "missing_input", NO_SOLUTIONS)

        logger.info("Export started", extra={"export_format": fmt.value, "solutions": len(solutions)})
        try:
            with EXPORT_GENERATION_SECONDS.labels(format=fmt.value).time():
                payload = self.render(solutions, options, diagram)
            location = self.delivery.deliver(payload.data, payload.filename, payload.content_type)
        except Exception as e:
            logger.exception("Export failed", extra={"export_format": fmt.value})
            EXPORT_FAILURES.labels(format=fmt.value, reason="render").inc()
            return ExportResult.failure(str(e) or e.__class__.__name__)

        EXPORT_BYTES_TOTAL.inc(len(payload.data))
        logger.info("Export completed", extra={
            "export_format": fmt.value,
            "export_filename": payload.filename,
            "bytes": len(payload.data),
            "location": location,
        })
        return ExportResult(
            success=True,
            filename=payload.filename,
            content_type=payload.content_type,
            data=payload.data,
            location=location,
        )

    def render(
        self,
        solutions: List[Solution],
        options: ExportOptions,
        diagram: Optional[ArchitectureDiagram] = None,
    ) -> ExportPayload:
        """Produce the payload without delivering it. Raises on any failure."""
        fmt = options.format
        if fmt == ExportFormat.PDF:
            return self.document_exporter.render(solutions, options)
        if fmt in IMAGE_FORMATS:
            if diagram is None:
                raise ValueError(DIAGRAM_NOT_FOUND)
            return self.image_exporter.render_image(diagram, fmt, options)
        if fmt == ExportFormat.JSON:
            return self.json_exporter.render(solutions, options)
        if fmt == ExportFormat.YAML:
            return self.yaml_exporter.render(solutions, options)
        if fmt == ExportFormat.MARKDOWN:
            return self.markdown_exporter.render(solutions, options)
        if fmt == ExportFormat.TERRAFORM:
            return self.terraform_exporter.render(solutions, options)
        raise ValueError(f"Unsupported export format: {fmt.value}")

    @staticmethod
    def _failure(fmt: ExportFormat, reason: str, message: str) -> ExportResult:
        logger.warning("Export rejected", extra={"export_format": fmt.value, "reason": reason, "error": message})
        EXPORT_FAILURES.labels(format=fmt.value, reason=reason).inc()
        return ExportResult.failure(message)


def get_export_service(delivery_mode: Optional[str] = None) -> ExportService:
    """New ExportService wired to the configured delivery channel."""
    return ExportService(delivery=get_delivery(delivery_mode))


__all__ = [
    'ExportService',
    'get_export_service',
    'DIAGRAM_NOT_FOUND',
    'SUPPORTED_FORMATS',
]
