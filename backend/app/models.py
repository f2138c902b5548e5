# backend/app/models.py
import json
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------- Enums ----------
class SolutionStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class ExportFormat(str, Enum):
    """Every format the export dialog can request.

    CLOUDFORMATION is declared but has no renderer; requesting it yields an
    "Unsupported export format" result.
    """
    PDF = "pdf"
    PNG = "png"
    SVG = "svg"
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"
    TERRAFORM = "terraform"
    CLOUDFORMATION = "cloudformation"


IMAGE_FORMATS = frozenset({ExportFormat.PNG, ExportFormat.SVG})


class ExportQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PageSize(str, Enum):
    A4 = "A4"
    LETTER = "letter"
    LEGAL = "legal"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


# ---------- Decoded sub-field shapes ----------
class AWSService(BaseModel):
    name: str = ""
    purpose: str = ""
    configuration: str = ""


class Position(BaseModel):
    x: float = 0
    y: float = 0


class ArchitectureComponent(BaseModel):
    id: str
    name: str = ""
    type: str = ""
    position: Position = Field(default_factory=Position)


class ArchitectureConnection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    label: str = ""


class Architecture(BaseModel):
    components: List[ArchitectureComponent] = Field(default_factory=list)
    connections: List[ArchitectureConnection] = Field(default_factory=list)


# ---------- Core models ----------
class Solution(BaseModel):
    """A stored AWS architecture recommendation.

    `aws_services`, `architecture`, `recommendations` and `tags` hold JSON text
    exactly as the store keeps it. Decoding happens per renderer in
    app.services.exporters.solution_fields. Unknown stored columns are kept
    so JSON export can pass them through.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str = ""
    description: str = ""
    aws_services: Optional[str] = Field(None, alias="awsServices")
    architecture: Optional[str] = None
    recommendations: Optional[str] = None
    tags: Optional[str] = None
    requirements: Optional[str] = None
    status: SolutionStatus = SolutionStatus.DRAFT
    cost_estimate: Optional[float] = Field(None, alias="costEstimate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("id", mode="before")
    def coerce_id(cls, v):
        return v if isinstance(v, str) else str(v)

    @field_validator("aws_services", "architecture", "recommendations", "tags", mode="before")
    def encode_json_fields(cls, v):
        # API callers may send already-decoded values; store them as JSON text
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v, ensure_ascii=False)

    @field_validator("status", mode="before")
    def default_status(cls, v):
        return SolutionStatus.DRAFT if v in (None, "") else v


class ExportOptions(BaseModel):
    """Per-call export settings. Section flags are only read by the PDF renderer."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    format: ExportFormat
    include_architecture: bool = Field(True, alias="includeArchitecture")
    include_details: bool = Field(True, alias="includeDetails")
    include_recommendations: bool = Field(True, alias="includeRecommendations")
    include_cost_analysis: bool = Field(True, alias="includeCostAnalysis")
    quality: ExportQuality = ExportQuality.HIGH
    page_size: PageSize = Field(PageSize.A4, alias="pageSize")
    orientation: Orientation = Orientation.PORTRAIT

    @field_validator("page_size", mode="before")
    def normalize_page_size(cls, v):
        if isinstance(v, str):
            for size in PageSize:
                if size.value.lower() == v.lower():
                    return size
        return v


class ExportResult(BaseModel):
    success: bool
    filename: Optional[str] = None
    content_type: Optional[str] = None
    data: Optional[bytes] = None
    location: Optional[str] = None  # path or URL reported by the delivery channel
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "ExportResult":
        return cls(success=False, error=error)
