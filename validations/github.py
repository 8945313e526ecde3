# =============================================================================
# validations/github.py - GitHub Pull Request Validator
# =============================================================================
# Errors:
#   NUMBER_MISMATCH      - event number differs from pull_request.number
#   INVALID_TIMESTAMPS   - updated_at earlier than created_at
#
# Warnings:
#   WIP_DETECTED, MISSING_DESCRIPTION, LARGE_CHANGESET, HIGH_DELETION_RATIO,
#   MANY_COMMITS, NO_REVIEWERS
# =============================================================================

import re

from core.models.validation import FieldError, FieldWarning
from payloads.github import GitHubPayload
from validations.base import BaseValidator, as_utc

WIP_PATTERN = re.compile(r"^\s*(\[?wip\]?|draft)\b", re.IGNORECASE)

MIN_DESCRIPTION_LENGTH = 20
LARGE_CHANGESET_LINES = 1000
MAX_COMMIT_COUNT = 20
HIGH_DELETION_RATIO = 0.8


class GitHubValidator(BaseValidator):
    """Validates GitHub pull_request webhook events."""

    shape = GitHubPayload
    model_type = "github"

    def check_rules(self, record: GitHubPayload) -> list[FieldError]:
        errors = []
        pr = record.pull_request

        if record.number != pr.number:
            errors.append(FieldError(
                field="number",
                message=f"Event number {record.number} does not match pull_request.number {pr.number}",
                code="NUMBER_MISMATCH",
                value=record.number,
            ))

        if as_utc(pr.updated_at) < as_utc(pr.created_at):
            errors.append(FieldError(
                field="pull_request.updated_at",
                message="updated_at must not be earlier than created_at",
                code="INVALID_TIMESTAMPS",
                value=pr.updated_at.isoformat(),
            ))

        return errors

    def check_warnings(self, record: GitHubPayload) -> list[FieldWarning]:
        warnings = []
        pr = record.pull_request

        if WIP_PATTERN.match(pr.title) and not pr.draft:
            warnings.append(FieldWarning(
                field="pull_request.title",
                message="Title marks the pull request as work in progress but it is not a draft",
                code="WIP_DETECTED",
                suggestion="Convert the pull request to a draft until it is ready for review",
            ))

        if not pr.body or len(pr.body.strip()) < MIN_DESCRIPTION_LENGTH:
            warnings.append(FieldWarning(
                field="pull_request.body",
                message="Pull request has little or no description",
                code="MISSING_DESCRIPTION",
                suggestion="Describe what changed and why to help reviewers",
            ))

        changed_lines = pr.additions + pr.deletions
        if changed_lines > LARGE_CHANGESET_LINES:
            warnings.append(FieldWarning(
                field="pull_request.additions",
                message=f"Large changeset: {changed_lines} lines changed",
                code="LARGE_CHANGESET",
                suggestion="Consider splitting into smaller pull requests",
            ))

        if changed_lines and pr.deletions / changed_lines > HIGH_DELETION_RATIO:
            warnings.append(FieldWarning(
                field="pull_request.deletions",
                message="Most of this change deletes code",
                code="HIGH_DELETION_RATIO",
                suggestion="Double-check that the removed code is no longer used",
            ))

        if pr.commits > MAX_COMMIT_COUNT:
            warnings.append(FieldWarning(
                field="pull_request.commits",
                message=f"Pull request has {pr.commits} commits",
                code="MANY_COMMITS",
                suggestion="Consider squashing related commits",
            ))

        if pr.state == "open" and not pr.draft and not pr.requested_reviewers:
            warnings.append(FieldWarning(
                field="pull_request.requested_reviewers",
                message="No reviewers requested",
                code="NO_REVIEWERS",
                suggestion="Request at least one reviewer",
            ))

        return warnings
