"""Base exporter with the naming and formatting helpers every renderer shares."""

import time
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from app.models import ExportOptions, Solution

FILE_PREFIX = "vibesolver"


class ExportPayload(NamedTuple):
    data: bytes
    filename: str
    content_type: str


class BaseExporter:
    """Base class for all renderers.

    Subclasses implement `render`. Renderers read `solutions` and never
    modify them; every call builds its output from scratch.
    """

    content_type = "application/octet-stream"
    extension = "bin"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        raise NotImplementedError

    def payload(self, text: str, filename: str) -> ExportPayload:
        return ExportPayload(text.encode("utf-8"), filename, self.content_type)

    def timestamped_filename(self, kind: str) -> str:
        """`vibesolver-{kind}-{epochMillis}.{ext}`"""
        return f"{FILE_PREFIX}-{kind}-{epoch_millis()}.{self.extension}"

    def dated_filename(self, kind: str) -> str:
        """`vibesolver-{kind}-{YYYY-MM-DD}.{ext}` using the UTC date."""
        today = datetime.now(timezone.utc).date().isoformat()
        return f"{FILE_PREFIX}-{kind}-{today}.{self.extension}"


def epoch_millis() -> int:
    return int(time.time() * 1000)


def format_number(value: float) -> str:
    """Render 42.0 as "42" and 42.5 as "42.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_cost(value: Optional[float]) -> str:
    return "TBD" if value is None else format_number(value)


def format_date(value: datetime) -> str:
    """Short US-style date (M/D/YYYY)."""
    return f"{value.month}/{value.day}/{value.year}"


def status_label(solution: Solution) -> str:
    return solution.status.value
