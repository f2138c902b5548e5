"""Format renderers for solution exports.

Architecture:
- BaseExporter: naming/formatting helpers and the render() contract
- DocumentExporter: paginated PDF report (PyMuPDF)
- ImageExporter: architecture diagram as PNG (rasterized) or SVG
- JSONExporter / YAMLExporter: structured data
- TerraformExporter: resource stub scaffolding
- MarkdownExporter: human-readable documentation
"""

from .base_exporter import BaseExporter, ExportPayload
from .diagram import ArchitectureDiagram, resolve_diagram
from .document_exporter import DocumentExporter
from .image_exporter import ImageExporter
from .markdown_exporter import MarkdownExporter
from .structured_exporter import JSONExporter, YAMLExporter
from .terraform_exporter import TerraformExporter

__all__ = [
    'BaseExporter',
    'ExportPayload',
    'ArchitectureDiagram',
    'resolve_diagram',
    'DocumentExporter',
    'ImageExporter',
    'MarkdownExporter',
    'JSONExporter',
    'YAMLExporter',
    'TerraformExporter',
]
