"""Terraform scaffold exporter.

Turns each solution's AWS service list into resource stubs. The stubs are
documentation scaffolding: the free-text configuration is carried as a
comment and never parsed into resource arguments.
"""

import re
from typing import Dict, List

from app.config import settings
from app.models import AWSService, ExportOptions, Solution
from .base_exporter import BaseExporter, ExportPayload, format_number
from .solution_fields import decode_services

PROVIDER_VERSION = "~> 5.0"
GENERIC_RESOURCE_TYPE = "aws_resource"

RESOURCE_TYPES: Dict[str, str] = {
    "ec2": "aws_instance",
    "rds": "aws_db_instance",
    "s3": "aws_s3_bucket",
    "lambda": "aws_lambda_function",
    "api_gateway": "aws_api_gateway_rest_api",
    "cloudfront": "aws_cloudfront_distribution",
    "elb": "aws_lb",
    "vpc": "aws_vpc",
    "iam": "aws_iam_role",
}

# "Amazon S3" and "AWS Lambda" resolve like "S3" and "Lambda"
_VENDOR_PREFIXES = ("amazon_", "aws_")


def normalize_service_name(name: str) -> str:
    """Lowercase, whitespace runs to underscores, other identifier-unsafe chars to underscores."""
    normalized = re.sub(r"\s+", "_", name.strip().lower())
    return re.sub(r"[^a-z0-9_-]", "_", normalized)


def resource_type_for(name: str) -> str:
    """Map a service name to a Terraform resource type, falling back to `aws_resource`."""
    key = normalize_service_name(name)
    if key in RESOURCE_TYPES:
        return RESOURCE_TYPES[key]
    for prefix in _VENDOR_PREFIXES:
        if key.startswith(prefix) and key[len(prefix):] in RESOURCE_TYPES:
            return RESOURCE_TYPES[key[len(prefix):]]
    return GENERIC_RESOURCE_TYPE


def _hcl_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return re.sub(r"\s*\n\s*", " ", escaped)


def _comment(value: str) -> str:
    return " ".join(value.split())


class TerraformExporter(BaseExporter):
    content_type = "text/plain"
    extension = "tf"

    def render(self, solutions: List[Solution], options: ExportOptions) -> ExportPayload:
        content = "\n\n".join(self.render_solution(solution) for solution in solutions)
        return self.payload(content, self.timestamped_filename("terraform"))

    def render_solution(self, solution: Solution) -> str:
        services = decode_services(solution)
        resources = "\n\n".join(self._resource_blocks(services))
        cost = format_number(solution.cost_estimate or 0)
        description_comment = "\n".join(f"# {line}" for line in (solution.description or "").splitlines() or [""])

        return f"""# {_comment(solution.title)}
{description_comment}

terraform {{
  required_providers {{
    aws = {{
      source  = "hashicorp/aws"
      version = "{PROVIDER_VERSION}"
    }}
  }}
}}

provider "aws" {{
  region = var.aws_region
}}

variable "aws_region" {{
  description = "AWS region"
  type        = string
  default     = "{settings.terraform_default_region}"
}}

variable "environment" {{
  description = "Environment name"
  type        = string
  default     = "{settings.terraform_default_environment}"
}}

# Resources for {_comment(solution.title)}
{resources}

# Outputs
output "solution_info" {{
  value = {{
    name = "{_hcl_string(solution.title)}"
    description = "{_hcl_string(solution.description)}"
    cost_estimate = {cost}
  }}
}}
"""

    def _resource_blocks(self, services: List[AWSService]) -> List[str]:
        blocks = []
        seen: Dict[str, int] = {}
        for service in services:
            label = normalize_service_name(service.name) or "service"
            # Two services with the same name still need distinct labels
            seen[label] = seen.get(label, 0) + 1
            if seen[label] > 1:
                label = f"{label}_{seen[label]}"
            blocks.append(self._resource_block(service, label))
        return blocks

    @staticmethod
    def _resource_block(service: AWSService, label: str) -> str:
        return f"""# {_comment(service.name)}
resource "{resource_type_for(service.name)}" "{label}" {{
  # {_comment(service.purpose)}
  # Configuration: {_comment(service.configuration)}

  tags = {{
    Name        = "${{var.environment}}-{label}"
    Environment = var.environment
    ManagedBy   = "{settings.export_generator}"
  }}
}}"""
