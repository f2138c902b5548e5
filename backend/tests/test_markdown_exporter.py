import json
import re

from app.services.exporters import MarkdownExporter


def test_demo_solution_report(demo_solution, make_options):
    payload = MarkdownExporter().render([demo_solution], make_options("markdown"))
    text = payload.data.decode("utf-8")

    assert "# Demo" in text
    assert "### Amazon S3" in text
    assert "**Purpose**: Storage" in text
    assert "**Configuration**: Standard" in text
    assert "$42/month" in text
    assert "1. Enable logging" in text
    assert "- **Status**: active" in text
    assert "- **Tags**: web, storage" in text
    assert "- **Created**: 3/5/2024" in text
    assert "- **Last Updated**: 3/6/2024" in text
    assert payload.content_type == "text/markdown"
    assert re.fullmatch(r"vibesolver-documentation-\d{13}\.md", payload.filename)


def test_missing_cost_and_tags(make_solution, make_options):
    solution = make_solution(costEstimate=None, tags=None)
    text = MarkdownExporter().render([solution], make_options("markdown")).data.decode("utf-8")

    assert "$TBD/month" in text
    assert "- **Tags**: None" in text


def test_unparsable_services_render_no_service_sections(make_solution, make_options):
    solution = make_solution(awsServices="{not json", recommendations="nope")
    text = MarkdownExporter().render([solution], make_options("markdown")).data.decode("utf-8")

    assert "## AWS Services" in text
    assert "###" not in text
    assert "1." not in text


def test_solutions_separated_by_rule(make_solution, make_options):
    first = make_solution(title="First")
    second = make_solution(id="sol-2", title="Second")
    text = MarkdownExporter().render([first, second], make_options("markdown")).data.decode("utf-8")

    assert text.count("\n---\n") == 2
    assert text.index("# First") < text.index("# Second")


def test_section_flags_are_ignored(demo_solution, make_options):
    options = make_options("markdown", include_recommendations=False, include_details=False)
    text = MarkdownExporter().render([demo_solution], options).data.decode("utf-8")

    assert "1. Enable logging" in text
    assert "## Overview" in text


def test_input_is_not_mutated(demo_solution, make_options):
    before = demo_solution.model_dump()
    MarkdownExporter().render([demo_solution], make_options("markdown"))
    assert demo_solution.model_dump() == before
    assert json.loads(demo_solution.aws_services)[0]["name"] == "Amazon S3"
