"""JSON and YAML exporters.

JSON is the canonical, lossless form: every JSON-text column is decoded into
native structures, and unknown stored columns pass straight through. YAML is
a hand-assembled, human-oriented summary with a fixed key set.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from app.config import settings
from app.models import ExportOptions, Solution
from .base_exporter import BaseExporter, ExportPayload, format_number, status_label
from .solution_fields import decode_services, load_json_field


def solution_document(solution: Solution) -> Dict[str, Any]:
    """Solution with camelCase keys, ISO timestamps and decoded sub-fields."""
    document = solution.model_dump(by_alias=True, mode="json")
    document["awsServices"] = load_json_field(solution.aws_services, list, [])
    document["architecture"] = load_json_field(solution.architecture, dict, None)
    document["recommendations"] = load_json_field(solution.recommendations, list, [])
    document["tags"] = load_json_field(solution.tags, list, [])
    return document


def _isoformat_utc(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JSONExporter(BaseExporter):
    content_type = "application/json"
    extension = "json"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        export_data = {
            "metadata": {
                "exportedAt": _isoformat_utc(datetime.now(timezone.utc)),
                "version": settings.export_version,
                "count": len(solutions),
                "generator": settings.export_generator,
            },
            "solutions": [solution_document(solution) for solution in solutions],
        }
        content = json.dumps(export_data, indent=2, ensure_ascii=False)
        return self.payload(content, self.timestamped_filename("export"))


def _quote(value: Any) -> str:
    # A JSON string literal is a valid YAML double-quoted scalar
    return json.dumps("" if value is None else str(value), ensure_ascii=False)


class YAMLExporter(BaseExporter):
    content_type = "text/yaml"
    extension = "yaml"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        content = "\n".join(self.render_solution(solution) for solution in solutions)
        return self.payload(content, self.timestamped_filename("export"))

    def render_solution(self, solution: Solution) -> str:
        services = decode_services(solution)
        recommendations = load_json_field(solution.recommendations, list, [])
        tags = load_json_field(solution.tags, list, [])
        stored = solution.model_dump(by_alias=True, mode="json", include={"created_at", "updated_at"})

        lines = [
            "---",
            f"name: {_quote(solution.title)}",
            f"description: {_quote(solution.description)}",
            f"status: {status_label(solution)}",
            # Unknown cost is written as 0
            f"cost_estimate: {format_number(solution.cost_estimate or 0)}",
            f"tags: [{', '.join(_quote(tag) for tag in tags)}]",
        ]

        if services:
            lines.append("aws_services:")
            for service in services:
                lines.append(f"  - name: {_quote(service.name)}")
                lines.append(f"    purpose: {_quote(service.purpose)}")
                lines.append(f"    configuration: {_quote(service.configuration)}")
        else:
            lines.append("aws_services: []")

        if recommendations:
            lines.append("recommendations:")
            lines.extend(f"  - {_quote(rec)}" for rec in recommendations)
        else:
            lines.append("recommendations: []")

        lines.append(f"created_at: {_quote(stored['createdAt'])}")
        lines.append(f"updated_at: {_quote(stored['updatedAt'])}")
        return "\n".join(lines) + "\n"
