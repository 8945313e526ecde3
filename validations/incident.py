# =============================================================================
# validations/incident.py - Incident Report Validator
# =============================================================================
# Field rules come from payloads.incident.IncidentPayload. On top of them:
#
# Errors:
#   INVALID_ID_FORMAT           - id must look like INC-YYYYMMDD-NNNN
#   PRIORITY_SEVERITY_MISMATCH  - priority must fit the severity band
#
# Warnings:
#   CRITICAL_INCIDENT_UNASSIGNED, PRODUCTION_LOW_PRIORITY, STALE_INCIDENT,
#   GENERIC_INCIDENT_TITLE, SECURITY_INCIDENT_NO_TAGS
# =============================================================================

import re

from core.models.validation import FieldError, FieldWarning
from lib.utils import utc_now
from payloads.incident import IncidentPayload
from validations.base import BaseValidator, as_utc

INCIDENT_ID_PATTERN = re.compile(r"^INC-\d{8}-\d{4}$")

# Allowed priorities for each severity level
SEVERITY_PRIORITIES: dict[str, tuple[int, ...]] = {
    "low": (1, 2),
    "medium": (2, 3),
    "high": (3, 4),
    "critical": (4, 5),
}

STALE_AFTER_HOURS = 24
GENERIC_TITLE_WORDS = ("issue", "problem", "error", "bug", "broken", "down", "failure")


class IncidentValidator(BaseValidator):
    """Validates incident reports."""

    shape = IncidentPayload
    model_type = "incident"

    def check_rules(self, record: IncidentPayload) -> list[FieldError]:
        errors = []

        if not INCIDENT_ID_PATTERN.match(record.id):
            errors.append(FieldError(
                field="id",
                message=(
                    "incident ID must follow format INC-YYYYMMDD-NNNN "
                    f"(e.g., INC-20240924-0001), got: {record.id}"
                ),
                code="INVALID_ID_FORMAT",
                value=record.id,
            ))

        allowed = SEVERITY_PRIORITIES[record.severity]
        if record.priority not in allowed:
            errors.append(FieldError(
                field="priority",
                message=(
                    f"priority {record.priority} is inconsistent with severity "
                    f"'{record.severity}' (expected: {list(allowed)})"
                ),
                code="PRIORITY_SEVERITY_MISMATCH",
                value=f"priority={record.priority}, severity={record.severity}",
            ))

        return errors

    def check_warnings(self, record: IncidentPayload) -> list[FieldWarning]:
        warnings = []

        if record.severity == "critical" and not record.assigned_to:
            warnings.append(FieldWarning(
                field="assigned_to",
                message="Critical incident should be assigned to an engineer immediately",
                code="CRITICAL_INCIDENT_UNASSIGNED",
                suggestion="Assign to on-call engineer or escalation team",
            ))

        if record.environment == "production" and record.priority < 3:
            warnings.append(FieldWarning(
                field="priority",
                message=f"Production incident has low priority ({record.priority}), consider increasing",
                code="PRODUCTION_LOW_PRIORITY",
                suggestion="Review if priority should be 3 or higher for production issues",
            ))

        if record.status in ("open", "investigating"):
            hours_open = (utc_now() - as_utc(record.reported_at)).total_seconds() / 3600
            if hours_open > STALE_AFTER_HOURS:
                warnings.append(FieldWarning(
                    field="status",
                    message=f"Incident has been {record.status} for {hours_open:.1f} hours",
                    code="STALE_INCIDENT",
                    suggestion="Review incident progress and update status or escalate",
                ))

        if record.severity in ("high", "critical"):
            title = record.title.lower()
            if len(record.title.split()) < 6 and any(word in title for word in GENERIC_TITLE_WORDS):
                warnings.append(FieldWarning(
                    field="title",
                    message="High/Critical severity incident has generic title",
                    code="GENERIC_INCIDENT_TITLE",
                    suggestion="Provide more specific description for high priority incidents",
                ))

        if record.category == "security" and not record.tags:
            warnings.append(FieldWarning(
                field="tags",
                message="Security incidents should have relevant tags for tracking and reporting",
                code="SECURITY_INCIDENT_NO_TAGS",
                suggestion="Add tags like 'security-breach', 'vulnerability', 'compliance', etc.",
            ))

        return warnings
