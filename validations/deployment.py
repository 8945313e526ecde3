# =============================================================================
# validations/deployment.py - Deployment Webhook Validator
# =============================================================================

import re

from core.models.validation import FieldError, FieldWarning
from payloads.deployment import DeploymentPayload
from validations.base import BaseValidator

# Starts with a letter; letters, digits and hyphens; no trailing hyphen
APP_NAME_PATTERN = re.compile(r"^[a-zA-Z]([a-zA-Z0-9-]*[a-zA-Z0-9])?$")

# MAJOR.MINOR.PATCH with optional pre-release and build metadata
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

PRODUCTION_BRANCHES = ("main", "master")
UNSTABLE_VERSION_MARKERS = ("dev", "test", "alpha")


class DeploymentValidator(BaseValidator):
    """Validates deployment webhook events."""

    shape = DeploymentPayload
    model_type = "deployment"

    def check_rules(self, record: DeploymentPayload) -> list[FieldError]:
        errors = []

        if not APP_NAME_PATTERN.match(record.app_name):
            errors.append(FieldError(
                field="app_name",
                message="App name must start with a letter and contain only letters, digits and hyphens",
                code="INVALID_APP_NAME",
                value=record.app_name,
            ))

        if not SEMVER_PATTERN.match(record.version):
            errors.append(FieldError(
                field="version",
                message="Version must follow semantic versioning (e.g., 1.4.2 or 2.0.0-rc.1)",
                code="INVALID_SEMVER",
                value=record.version,
            ))

        return errors

    def check_warnings(self, record: DeploymentPayload) -> list[FieldWarning]:
        warnings = []

        if record.environment == "production" and record.branch not in PRODUCTION_BRANCHES:
            warnings.append(FieldWarning(
                field="branch",
                message=f"Production deployment from '{record.branch}' branch is not recommended",
                code="NON_MAIN_PROD_DEPLOY",
                suggestion="Consider deploying production from main/master branch",
            ))

        if record.rollback:
            warnings.append(FieldWarning(
                field="rollback",
                message="This is a rollback deployment",
                code="ROLLBACK_DEPLOYMENT",
                suggestion="Ensure the target version is stable",
            ))

        if record.status == "failed":
            warnings.append(FieldWarning(
                field="status",
                message="Deployment has failed status",
                code="FAILED_DEPLOYMENT",
                suggestion="Check deployment logs and investigate failure cause",
            ))

        version = record.version.lower()
        if record.environment == "production" and any(marker in version for marker in UNSTABLE_VERSION_MARKERS):
            warnings.append(FieldWarning(
                field="version",
                message=f"Version '{record.version}' appears to be a development/test version",
                code="DEV_VERSION_IN_PROD",
                suggestion="Ensure you're deploying a stable production version",
            ))

        return warnings
