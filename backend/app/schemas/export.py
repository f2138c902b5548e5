from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional

from app.models import ExportOptions, Solution


class ExportRequest(BaseModel):
    """Request to export a selection of solutions."""
    solutions: List[Solution] = Field(default_factory=list, description="Solutions as stored (JSON sub-fields as text or decoded)")
    options: ExportOptions
    diagram_solution_id: Optional[str] = Field(None, description="Solution whose architecture diagram is displayed (png/svg only)")


class StoredExportResponse(BaseModel):
    """Returned instead of the file body when the export was stored remotely."""
    filename: str
    content_type: str
    url: str
    stored: bool = True


__all__ = [
    'ExportRequest',
    'StoredExportResponse',
]
