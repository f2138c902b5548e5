import json
from pathlib import Path

import pytest

from app.models import ExportFormat
from app.services.delivery import FileSystemDelivery, InMemoryDelivery, R2Delivery, get_delivery
from app.services.exporter import DIAGRAM_NOT_FOUND, NO_SOLUTIONS, ExportService
from app.services.exporters import resolve_diagram
from app.services.storage.cloudflare_r2 import CloudflareR2Storage

TEXT_FORMATS = ["pdf", "json", "yaml", "markdown", "terraform"]


class FakeS3Client:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType, **extra):
        if self.fail:
            raise RuntimeError("bucket unavailable")
        self.objects[(Bucket, Key)] = {"Body": Body, "ContentType": ContentType, **extra}

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://r2.example/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"


def fake_storage(client: FakeS3Client) -> CloudflareR2Storage:
    return CloudflareR2Storage(
        access_key_id="key",
        secret_access_key="secret",
        endpoint_url="https://r2.example",
        bucket="exports-bucket",
        presign_expiry=600,
        client=client,
    )


def test_unsupported_format(service, delivery, demo_solution, make_options):
    result = service.export([demo_solution], make_options("cloudformation"))

    assert result.success is False
    assert result.error == "Unsupported export format: cloudformation"
    assert result.data is None
    assert delivery.files == []


@pytest.mark.parametrize("fmt", ["png", "svg"])
def test_image_requires_diagram(service, delivery, demo_solution, make_options, fmt):
    result = service.export([demo_solution], make_options(fmt))

    assert result.success is False
    assert result.error == DIAGRAM_NOT_FOUND
    assert delivery.files == []


@pytest.mark.parametrize("fmt", TEXT_FORMATS)
def test_empty_selection(service, delivery, make_options, fmt):
    result = service.export([], make_options(fmt))

    assert result.success is False
    assert result.error == NO_SOLUTIONS
    assert delivery.files == []


@pytest.mark.parametrize("fmt,content_type,extension", [
    ("pdf", "application/pdf", "pdf"),
    ("json", "application/json", "json"),
    ("yaml", "text/yaml", "yaml"),
    ("markdown", "text/markdown", "md"),
    ("terraform", "text/plain", "tf"),
])
def test_successful_export_is_delivered(service, delivery, demo_solution, make_options, fmt, content_type, extension):
    result = service.export([demo_solution], make_options(fmt))

    assert result.success is True
    assert result.error is None
    assert result.content_type == content_type
    assert result.filename.startswith("vibesolver-")
    assert result.filename.endswith(f".{extension}")
    assert len(delivery.files) == 1
    assert delivery.last.filename == result.filename
    assert delivery.last.data == result.data
    assert delivery.last.content_type == content_type


@pytest.mark.parametrize("fmt", ["png", "svg"])
def test_image_export_with_diagram(service, delivery, demo_solution, make_options, fmt):
    diagram = resolve_diagram([demo_solution], demo_solution.id)
    result = service.export([demo_solution], make_options(fmt, quality="low"), diagram=diagram)

    assert result.success is True
    assert result.filename.endswith(f".{fmt}")
    assert delivery.last.filename == result.filename


@pytest.mark.parametrize("fmt", TEXT_FORMATS)
def test_malformed_fields_never_fail(service, make_solution, make_options, fmt):
    solution = make_solution(
        awsServices="{",
        architecture="[1",
        recommendations="nope",
        tags="42",
        costEstimate=None,
        status=None,
    )
    result = service.export([solution], make_options(fmt))

    assert result.success is True, result.error
    assert result.data


def test_renderer_error_becomes_failure(service, delivery, demo_solution, make_options, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("renderer blew up")

    monkeypatch.setattr(service.markdown_exporter, "render", explode)
    result = service.export([demo_solution], make_options("markdown"))

    assert result.success is False
    assert result.error == "renderer blew up"
    assert delivery.files == []


def test_delivery_error_becomes_failure(demo_solution, make_options):
    class BrokenDelivery:
        def deliver(self, data, filename, content_type):
            raise OSError("disk full")

    result = ExportService(delivery=BrokenDelivery()).export([demo_solution], make_options("json"))

    assert result.success is False
    assert result.error == "disk full"


def test_inputs_are_not_modified(service, demo_solution, make_options):
    before = demo_solution.model_dump()
    for fmt in TEXT_FORMATS:
        service.export([demo_solution], make_options(fmt))

    assert demo_solution.model_dump() == before


def test_filesystem_delivery(tmp_path: Path, demo_solution, make_options):
    service = ExportService(delivery=FileSystemDelivery(tmp_path / "out"))
    result = service.export([demo_solution], make_options("markdown"))

    assert result.success is True
    written = Path(result.location)
    assert written.parent == tmp_path / "out"
    assert written.name == result.filename
    assert written.read_bytes() == result.data


def test_r2_delivery_returns_url(demo_solution, make_options):
    client = FakeS3Client()
    service = ExportService(delivery=R2Delivery(storage=fake_storage(client)))
    result = service.export([demo_solution], make_options("json"))

    assert result.success is True
    key = f"exports/{result.filename}"
    assert result.location == f"https://r2.example/exports-bucket/{key}?expires=600"
    stored = client.objects[("exports-bucket", key)]
    assert stored["ContentType"] == "application/json"
    assert stored["ContentDisposition"] == f'attachment; filename="{result.filename}"'
    assert json.loads(stored["Body"])["metadata"]["count"] == 1


def test_r2_delivery_failure(demo_solution, make_options):
    service = ExportService(delivery=R2Delivery(storage=fake_storage(FakeS3Client(fail=True))))
    result = service.export([demo_solution], make_options("json"))

    assert result.success is False
    assert result.error == "bucket unavailable"


def test_get_delivery():
    assert isinstance(get_delivery("memory"), InMemoryDelivery)
    assert isinstance(get_delivery("FileSystem"), FileSystemDelivery)
    with pytest.raises(ValueError, match="Unknown export delivery mode"):
        get_delivery("carrier-pigeon")


def test_format_values_are_closed():
    assert {fmt.value for fmt in ExportFormat} == {
        "pdf", "png", "svg", "json", "yaml", "markdown", "terraform", "cloudformation",
    }
