import json
import re

import yaml

from app.models import Solution
from app.services.exporters import JSONExporter, YAMLExporter


def export_json(solutions, make_options) -> dict:
    payload = JSONExporter().render(solutions, make_options("json"))
    assert payload.content_type == "application/json"
    assert re.fullmatch(r"vibesolver-export-\d{13}\.json", payload.filename)
    return json.loads(payload.data)


def test_json_metadata(demo_solution, make_options):
    exported = export_json([demo_solution, demo_solution], make_options)
    metadata = exported["metadata"]

    assert metadata["version"] == "1.0"
    assert metadata["count"] == 2
    assert metadata["generator"] == "VibeSolver"
    assert metadata["exportedAt"].endswith("Z")


def test_json_decodes_sub_fields(demo_solution, make_options):
    solution = export_json([demo_solution], make_options)["solutions"][0]

    assert solution["awsServices"] == [{"name": "Amazon S3", "purpose": "Storage", "configuration": "Standard"}]
    assert solution["architecture"]["components"][0]["id"] == "cdn"
    assert solution["recommendations"] == ["Enable logging"]
    assert solution["tags"] == ["web", "storage"]
    assert solution["costEstimate"] == 42
    assert solution["status"] == "active"
    assert solution["createdAt"].startswith("2024-03-05T10:00:00")


def test_json_is_lossless_for_well_formed_fields(demo_solution, make_options):
    solution = export_json([demo_solution], make_options)["solutions"][0]

    for key, raw in [
        ("awsServices", demo_solution.aws_services),
        ("architecture", demo_solution.architecture),
        ("recommendations", demo_solution.recommendations),
        ("tags", demo_solution.tags),
    ]:
        assert solution[key] == json.loads(raw)
        assert json.loads(json.dumps(solution[key])) == json.loads(raw)


def test_json_keeps_unknown_keys_in_nested_values(make_solution, make_options):
    services = [{"name": "EC2", "purpose": "Web", "configuration": "t3.micro", "tier": "free"}]
    solution = make_solution(awsServices=json.dumps(services), requirements="Host a site", isFavorite=True)
    exported = export_json([solution], make_options)["solutions"][0]

    assert exported["awsServices"][0]["tier"] == "free"
    assert exported["requirements"] == "Host a site"
    assert exported["isFavorite"] is True


def test_json_reexport_is_stable(demo_solution, make_options):
    first = export_json([demo_solution], make_options)["solutions"]
    reloaded = [Solution.model_validate(item) for item in first]
    second = export_json(reloaded, make_options)["solutions"]

    assert second == first


def test_json_defaults_for_bad_fields(make_solution, make_options):
    solution = make_solution(awsServices="nope", architecture="[]", recommendations=None, tags="{}")
    exported = export_json([solution], make_options)["solutions"][0]

    assert exported["awsServices"] == []
    assert exported["architecture"] is None
    assert exported["recommendations"] == []
    assert exported["tags"] == []


def test_json_does_not_mutate_input(demo_solution, make_options):
    before = demo_solution.model_dump()
    export_json([demo_solution], make_options)
    assert demo_solution.model_dump() == before


def render_yaml(solutions, make_options) -> str:
    payload = YAMLExporter().render(solutions, make_options("yaml"))
    assert payload.content_type == "text/yaml"
    assert re.fullmatch(r"vibesolver-export-\d{13}\.yaml", payload.filename)
    return payload.data.decode("utf-8")


def test_yaml_documents_parse(demo_solution, make_options):
    text = render_yaml([demo_solution, demo_solution], make_options)
    documents = list(yaml.safe_load_all(text))

    assert text.startswith("---\n")
    assert len(documents) == 2
    doc = documents[0]
    assert doc["name"] == "Demo"
    assert doc["status"] == "active"
    assert doc["cost_estimate"] == 42
    assert doc["tags"] == ["web", "storage"]
    assert doc["aws_services"] == [{"name": "Amazon S3", "purpose": "Storage", "configuration": "Standard"}]
    assert doc["recommendations"] == ["Enable logging"]
    assert doc["created_at"].startswith("2024-03-05T10:00:00")


def test_yaml_null_cost_is_zero(make_solution, make_options):
    text = render_yaml([make_solution(costEstimate=None)], make_options)

    assert "cost_estimate: 0\n" in text
    assert "cost_estimate: null" not in text


def test_yaml_quotes_awkward_strings(make_solution, make_options):
    solution = make_solution(
        title='Say "hi": now',
        description="multi\nline # not a comment",
        recommendations=json.dumps(["- dash first", "colon: inside"]),
    )
    doc = next(yaml.safe_load_all(render_yaml([solution], make_options)))

    assert doc["name"] == 'Say "hi": now'
    assert doc["description"] == "multi\nline # not a comment"
    assert doc["recommendations"] == ["- dash first", "colon: inside"]


def test_yaml_empty_lists(make_solution, make_options):
    solution = make_solution(awsServices=None, recommendations="bad", tags=None)
    text = render_yaml([solution], make_options)
    doc = next(yaml.safe_load_all(text))

    assert "aws_services: []" in text
    assert doc["aws_services"] == []
    assert doc["recommendations"] == []
    assert doc["tags"] == []
