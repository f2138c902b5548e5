#!/usr/bin/env python3
"""Export stored solutions from a JSON file without running the API.

Usage:
  python backend/scripts/export_solutions.py <solutions.json> --format pdf|png|svg|json|yaml|markdown|terraform
      [--output-dir <dir>] [--diagram-solution-id ID] [--quality low|medium|high]
      [--page-size A4|letter|legal] [--orientation portrait|landscape]
      [--no-details] [--no-recommendations] [--no-architecture] [--no-cost-analysis]

Input:
  Either a JSON list of solutions, or an object with a "solutions" list
  (a previous JSON export can be fed back in).

Outputs (default dir = settings.export_dir):
  <output-dir>/vibesolver-<kind>-<timestamp>.<ext>
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from dotenv import load_dotenv

backend_root = Path(__file__).parent.parent
sys.path.insert(0, str(backend_root))
load_dotenv(backend_root / ".env")

from app.config import settings
from app.models import IMAGE_FORMATS, ExportFormat, ExportOptions, Solution
from app.services.delivery import FileSystemDelivery
from app.services.exporter import ExportService
from app.services.exporters import resolve_diagram


def load_solutions(path: Path) -> list[Solution]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("solutions", [])
    return [Solution.model_validate(item) for item in data]


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Export solutions to a file")
    ap.add_argument("input", type=str, help="Path to solutions JSON")
    ap.add_argument("--format", required=True, choices=[fmt.value for fmt in ExportFormat], help="Export format")
    ap.add_argument("--output-dir", type=str, default=str(settings.export_dir), help="Directory for the exported file")
    ap.add_argument("--diagram-solution-id", type=str, help="Solution whose diagram to export (png/svg)")
    ap.add_argument("--quality", default="high", choices=["low", "medium", "high"])
    ap.add_argument("--page-size", default="A4", choices=["A4", "letter", "legal"])
    ap.add_argument("--orientation", default="portrait", choices=["portrait", "landscape"])
    ap.add_argument("--no-details", action="store_true")
    ap.add_argument("--no-recommendations", action="store_true")
    ap.add_argument("--no-architecture", action="store_true")
    ap.add_argument("--no-cost-analysis", action="store_true")
    args = ap.parse_args(argv)

    try:
        solutions = load_solutions(Path(args.input))
    except Exception as e:
        print(f"ERROR: could not read solutions: {e}")
        return 1

    options = ExportOptions(
        format=args.format,
        quality=args.quality,
        page_size=args.page_size,
        orientation=args.orientation,
        include_details=not args.no_details,
        include_recommendations=not args.no_recommendations,
        include_architecture=not args.no_architecture,
        include_cost_analysis=not args.no_cost_analysis,
    )

    diagram = None
    if options.format in IMAGE_FORMATS:
        # Default to the first solution when only one was supplied
        solution_id = args.diagram_solution_id or (solutions[0].id if len(solutions) == 1 else None)
        diagram = resolve_diagram(solutions, solution_id)

    service = ExportService(delivery=FileSystemDelivery(Path(args.output_dir)))
    result = service.export(solutions, options, diagram=diagram)
    if not result.success:
        print(f"ERROR: {result.error}")
        return 1

    print(json.dumps({"filename": result.filename, "path": result.location, "bytes": len(result.data or b"")}, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
