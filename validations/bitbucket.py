# =============================================================================
# validations/bitbucket.py - Bitbucket Webhook Validator
# =============================================================================
# Errors:
#   INVALID_USERNAME   - username with mixed/repeated separators ("__", "-_", ...)
#   INVALID_TIMESTAMPS - repository, pull request or comment updated before
#                        it was created
#
# Warnings are grouped by the part of the event they inspect: pull request,
# push, repository and comment.
# =============================================================================

from datetime import datetime

from core.models.validation import FieldError, FieldWarning
from payloads.bitbucket import BitbucketPayload, BitbucketUser
from validations.base import (
    SECURITY_KEYWORDS,
    BaseValidator,
    age_in_days,
    as_utc,
    change_request_warnings,
    find_markers,
)

BAD_USERNAME_SEPARATORS = ("__", "--", "_-", "-_")
MIN_DESCRIPTION_LENGTH = 10
MAX_TASK_COUNT = 20
STALE_PR_DAYS = 7
MAX_PUSH_CHANGES = 10
LARGE_REPOSITORY_SIZE = 1_000_000
STALE_REPOSITORY_DAYS = 180
MAX_COMMENT_LENGTH = 5000
MAIN_BRANCHES = ("main", "master")


class BitbucketValidator(BaseValidator):
    """Validates Bitbucket repository webhooks."""

    shape = BitbucketPayload
    model_type = "bitbucket"

    def check_rules(self, record: BitbucketPayload) -> list[FieldError]:
        errors = []

        users: list[tuple[str, BitbucketUser]] = [
            ("actor", record.actor),
            ("repository.owner", record.repository.owner),
        ]
        if record.pullrequest is not None:
            users.append(("pullrequest.author", record.pullrequest.author))
        if record.comment is not None:
            users.append(("comment.user", record.comment.user))
        for field, user in users:
            if any(sep in user.username for sep in BAD_USERNAME_SEPARATORS):
                errors.append(FieldError(
                    field=f"{field}.username",
                    message="Username cannot contain consecutive special characters",
                    code="INVALID_USERNAME",
                    value=user.username,
                ))

        spans: list[tuple[str, datetime, datetime | None]] = [
            ("repository.updated_on", record.repository.created_on, record.repository.updated_on),
        ]
        if record.pullrequest is not None:
            spans.append(("pullrequest.updated_on", record.pullrequest.created_on, record.pullrequest.updated_on))
        if record.comment is not None:
            spans.append(("comment.updated_on", record.comment.created_on, record.comment.updated_on))
        for field, created, updated in spans:
            if updated is not None and as_utc(updated) < as_utc(created):
                errors.append(FieldError(
                    field=field,
                    message="Update time must not be earlier than creation time",
                    code="INVALID_TIMESTAMPS",
                    value=updated.isoformat(),
                ))

        return errors

    def check_warnings(self, record: BitbucketPayload) -> list[FieldWarning]:
        warnings = []
        if record.pullrequest is not None:
            warnings.extend(self._pull_request_warnings(record))
        if record.push is not None:
            warnings.extend(self._push_warnings(record))
        warnings.extend(self._repository_warnings(record))
        if record.comment is not None:
            warnings.extend(self._comment_warnings(record))
        return warnings

    # -------------------------------------------------------------------------
    # Warning groups
    # -------------------------------------------------------------------------

    def _pull_request_warnings(self, record: BitbucketPayload) -> list[FieldWarning]:
        pr = record.pullrequest
        warnings = change_request_warnings(
            pr.title,
            pr.description,
            title_field="pullrequest.title",
            content_field="pullrequest.description",
            kind="Pull request",
        )

        if len((pr.description or "").strip()) < MIN_DESCRIPTION_LENGTH:
            warnings.append(FieldWarning(
                field="pullrequest.description",
                message="Pull request has little or no description",
                code="MISSING_DESCRIPTION",
                suggestion="Describe what changed and why",
            ))

        if pr.task_count > MAX_TASK_COUNT:
            warnings.append(FieldWarning(
                field="pullrequest.task_count",
                message=f"Pull request has {pr.task_count} open tasks",
                code="HIGH_TASK_COUNT",
                suggestion="Resolve tasks or split the pull request",
            ))

        age = age_in_days(pr.created_on)
        if pr.state == "OPEN" and age > STALE_PR_DAYS:
            warnings.append(FieldWarning(
                field="pullrequest.created_on",
                message=f"Pull request has been open for {int(age)} days",
                code="STALE_PR",
                suggestion="Merge, decline or rebase stale pull requests",
            ))

        if pr.source.branch.name in MAIN_BRANCHES:
            warnings.append(FieldWarning(
                field="pullrequest.source.branch.name",
                message=f"Pull request is opened from '{pr.source.branch.name}'",
                code="MAIN_BRANCH_SOURCE",
                suggestion="Open pull requests from a feature branch",
            ))

        if pr.state == "OPEN":
            if not pr.reviewers:
                warnings.append(FieldWarning(
                    field="pullrequest.reviewers",
                    message="No reviewers assigned",
                    code="NO_REVIEWERS",
                    suggestion="Assign at least one reviewer",
                ))

            approvers = [p.user.uuid for p in pr.participants if p.approved]
            if pr.author.uuid in approvers:
                warnings.append(FieldWarning(
                    field="pullrequest.participants",
                    message="Pull request was approved by its author",
                    code="SELF_APPROVAL",
                    suggestion="Approvals should come from someone other than the author",
                ))
            elif not approvers:
                warnings.append(FieldWarning(
                    field="pullrequest.participants",
                    message="Pull request has no approvals",
                    code="NO_APPROVALS",
                    suggestion="Get at least one approval before merging",
                ))

        return warnings

    def _push_warnings(self, record: BitbucketPayload) -> list[FieldWarning]:
        warnings = []
        changes = record.push.changes

        if len(changes) > MAX_PUSH_CHANGES:
            warnings.append(FieldWarning(
                field="push.changes",
                message=f"Push contains {len(changes)} ref changes",
                code="LARGE_PUSH",
                suggestion="Push smaller, related sets of changes",
            ))

        for i, change in enumerate(changes):
            if change.forced:
                warnings.append(FieldWarning(
                    field=f"push.changes[{i}].forced",
                    message="Force push detected",
                    code="FORCED_PUSH",
                    suggestion="Force pushes rewrite history; coordinate with collaborators",
                ))
            if change.new is not None and change.new.type == "branch" and change.new.name in MAIN_BRANCHES:
                warnings.append(FieldWarning(
                    field=f"push.changes[{i}].new.name",
                    message=f"Direct push to '{change.new.name}'",
                    code="MAIN_BRANCH_PUSH",
                    suggestion="Protect the main branch and merge through pull requests",
                ))

        return warnings

    def _repository_warnings(self, record: BitbucketPayload) -> list[FieldWarning]:
        warnings = []
        repo = record.repository

        owner_segment = repo.full_name.split("/", 1)[0]
        if owner_segment.lower() != repo.owner.username.lower():
            warnings.append(FieldWarning(
                field="repository.full_name",
                message=f"Repository '{repo.full_name}' is not owned by '{repo.owner.username}'",
                code="FORK_REPOSITORY",
                suggestion="Check that the event comes from the expected repository",
            ))

        if repo.size > LARGE_REPOSITORY_SIZE:
            warnings.append(FieldWarning(
                field="repository.size",
                message=f"Repository is large ({repo.size} bytes)",
                code="LARGE_REPOSITORY",
                suggestion="Consider Git LFS for large files",
            ))

        age = age_in_days(repo.updated_on)
        if age > STALE_REPOSITORY_DAYS:
            warnings.append(FieldWarning(
                field="repository.updated_on",
                message=f"Repository has not been updated in {int(age)} days",
                code="STALE_REPOSITORY",
                suggestion="Archive repositories that are no longer maintained",
            ))

        return warnings

    def _comment_warnings(self, record: BitbucketPayload) -> list[FieldWarning]:
        warnings = []
        raw = record.comment.content.raw

        keywords = find_markers(raw, SECURITY_KEYWORDS)
        if keywords:
            warnings.append(FieldWarning(
                field="comment.content.raw",
                message=f"Comment mentions sensitive terms: {', '.join(keywords)}",
                code="SENSITIVE_COMMENT",
                suggestion="Don't share credentials or secrets in comments",
            ))

        if len(raw) > MAX_COMMENT_LENGTH:
            warnings.append(FieldWarning(
                field="comment.content.raw",
                message=f"Comment is {len(raw)} characters long",
                code="LONG_COMMENT",
                suggestion="Move long discussions to a linked document",
            ))

        return warnings
