"""Best-effort decoding of the JSON text columns carried by a Solution.

Stored sub-fields are trusted only as far as `json.loads` and a shape check.
Anything unparsable or of the wrong top-level shape reads as absent, so one
bad record degrades its own section instead of failing the whole export.
"""

import json
from typing import Any, List, Optional

from pydantic import ValidationError

from app.models import Architecture, AWSService, Solution
from app.utils.logging import logger


def load_json_field(raw: Optional[str], expected: type, default: Any = None) -> Any:
    """Parse `raw` and return it if the top-level value is an `expected` instance.

    Returns `default` for null, empty, malformed or wrongly-shaped input.
    """
    if raw is None or raw == "":
        return default
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Unparsable solution field treated as empty", extra={"preview": str(raw)[:80]})
        return default
    if not isinstance(value, expected):
        return default
    return value


def decode_services(solution: Solution) -> List[AWSService]:
    items = load_json_field(solution.aws_services, list, [])
    services = []
    for item in items:
        if not isinstance(item, dict):
            continue
        services.append(AWSService(
            name=_text(item.get("name")),
            purpose=_text(item.get("purpose")),
            configuration=_text(item.get("configuration")),
        ))
    return services


def decode_architecture(solution: Solution) -> Optional[Architecture]:
    data = load_json_field(solution.architecture, dict)
    if data is None:
        return None
    try:
        return Architecture.model_validate(data)
    except ValidationError:
        logger.debug("Architecture field has unexpected shape", extra={"solution_id": solution.id})
        return None


def decode_recommendations(solution: Solution) -> List[str]:
    return _string_list(solution.recommendations)


def decode_tags(solution: Solution) -> List[str]:
    return _string_list(solution.tags)


def _string_list(raw: Optional[str]) -> List[str]:
    items = load_json_field(raw, list, [])
    return [_text(item) for item in items if item is not None]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
