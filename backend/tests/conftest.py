import json

import pytest

from app.models import ExportFormat, ExportOptions, Solution
from app.services.delivery import InMemoryDelivery
from app.services.exporter import ExportService

ARCHITECTURE = {
    "components": [
        {"id": "cdn", "name": "CloudFront", "type": "CDN", "position": {"x": 40, "y": 40}},
        {"id": "api", "name": "API Gateway", "type": "Gateway", "position": {"x": 260, "y": 40}},
        {"id": "fn", "name": "Lambda", "type": "Function", "position": {"x": 480, "y": 40}},
        {"id": "db", "name": "RDS", "type": "Database", "position": {"x": 480, "y": 200}},
    ],
    "connections": [
        {"from": "cdn", "to": "api", "label": "HTTPS"},
        {"from": "api", "to": "fn", "label": "invoke"},
        {"from": "fn", "to": "db", "label": "SQL queries"},
    ],
}


def _solution(**overrides) -> Solution:
    data = {
        "id": "sol-1",
        "title": "Demo",
        "description": "A demo solution",
        "awsServices": json.dumps([{"name": "Amazon S3", "purpose": "Storage", "configuration": "Standard"}]),
        "architecture": json.dumps(ARCHITECTURE),
        "recommendations": json.dumps(["Enable logging"]),
        "tags": json.dumps(["web", "storage"]),
        "status": "active",
        "costEstimate": 42,
        "createdAt": "2024-03-05T10:00:00Z",
        "updatedAt": "2024-03-06T12:30:00Z",
    }
    data.update(overrides)
    return Solution.model_validate(data)


@pytest.fixture
def make_solution():
    """Factory for solutions; overrides use the stored (camelCase) keys."""
    return _solution


@pytest.fixture
def demo_solution() -> Solution:
    return _solution()


@pytest.fixture
def make_options():
    def _options(fmt: str = "pdf", **overrides) -> ExportOptions:
        return ExportOptions(format=ExportFormat(fmt), **overrides)
    return _options


@pytest.fixture
def delivery() -> InMemoryDelivery:
    return InMemoryDelivery()


@pytest.fixture
def service(delivery) -> ExportService:
    return ExportService(delivery=delivery)
