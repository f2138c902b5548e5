"""Markdown documentation exporter.

Flattens each solution into a readable report. Section flags in ExportOptions
are not consulted: the report always carries every section.
"""

from typing import List

from app.models import AWSService, ExportOptions, Solution
from .base_exporter import BaseExporter, ExportPayload, format_cost, format_date, status_label
from .solution_fields import decode_recommendations, decode_services, decode_tags


class MarkdownExporter(BaseExporter):
    content_type = "text/markdown"
    extension = "md"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        content = "\n".join(self.render_solution(solution) for solution in solutions)
        return self.payload(content, self.timestamped_filename("documentation"))

    def render_solution(self, solution: Solution) -> str:
        services = decode_services(solution)
        recommendations = decode_recommendations(solution)
        tags = decode_tags(solution)

        lines = [
            f"# {solution.title}",
            "",
            solution.description,
            "",
            "## Overview",
            "",
            f"- **Status**: {status_label(solution)}",
            f"- **Cost Estimate**: ${format_cost(solution.cost_estimate)}/month",
            f"- **Created**: {format_date(solution.created_at)}",
            f"- **Last Updated**: {format_date(solution.updated_at)}",
            f"- **Tags**: {', '.join(tags) or 'None'}",
            "",
            "## AWS Services",
            "",
            "\n".join(self._service_section(service) for service in services),
            "## Recommendations",
            "",
            "\n".join(f"{index}. {rec}" for index, rec in enumerate(recommendations, start=1)),
            "",
            "---",
            "",
        ]
        return "\n".join(lines)

    @staticmethod
    def _service_section(service: AWSService) -> str:
        return (
            f"### {service.name}\n\n"
            f"**Purpose**: {service.purpose}\n\n"
            f"**Configuration**: {service.configuration}\n"
        )
