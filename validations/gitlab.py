# =============================================================================
# validations/gitlab.py - GitLab Webhook Validator
# =============================================================================
# Errors:
#   MISSING_MERGE_REQUEST - merge_request event without object_attributes
#   INVALID_TIMESTAMPS    - merge request updated before it was created
#   INVALID_USERNAME      - username with repeated separators ("..", "--", "__")
#
# Warnings (merge requests):
#   WIP_DETECTED, WIP_TITLE_MISMATCH, MISSING_DESCRIPTION, INCOMPLETE_TEMPLATE,
#   SECURITY_KEYWORDS, CONFIG_FILE_CHANGES, NO_REVIEWERS, STALE_MR,
#   MAIN_BRANCH_TARGET, SQUASH_RECOMMENDED, MERGE_CONFLICTS
#
# Warnings (any event):
#   LARGE_COMMIT_COUNT, PUBLIC_PROJECT
# =============================================================================

from core.models.validation import FieldError, FieldWarning
from payloads.gitlab import GitLabPayload
from validations.base import (
    WIP_MARKERS,
    BaseValidator,
    age_in_days,
    as_utc,
    change_request_warnings,
    find_markers,
)

MAX_COMMIT_COUNT = 50
MIN_DESCRIPTION_LENGTH = 10
STALE_MR_DAYS = 7
SQUASH_COMMIT_COUNT = 5
PUBLIC_VISIBILITY = 20
MAIN_BRANCHES = ("main", "master")
TEMPLATE_SECTIONS = ("summary", "changes", "testing", "checklist")
MAX_MISSING_SECTIONS = 2


class GitLabValidator(BaseValidator):
    """Validates GitLab push and merge request webhooks."""

    shape = GitLabPayload
    model_type = "gitlab"

    def check_rules(self, record: GitLabPayload) -> list[FieldError]:
        errors = []
        mr = record.object_attributes

        if record.object_kind == "merge_request" and mr is None:
            errors.append(FieldError(
                field="object_attributes",
                message="merge_request events must include object_attributes",
                code="MISSING_MERGE_REQUEST",
            ))

        if mr is not None and as_utc(mr.updated_at) < as_utc(mr.created_at):
            errors.append(FieldError(
                field="object_attributes.updated_at",
                message="updated_at must not be earlier than created_at",
                code="INVALID_TIMESTAMPS",
                value=mr.updated_at.isoformat(),
            ))

        usernames = [("user_username", record.user_username)]
        if record.user is not None:
            usernames.append(("user.username", record.user.username))
        for field, username in usernames:
            if username and any(sep in username for sep in ("..", "--", "__")):
                errors.append(FieldError(
                    field=field,
                    message="Username cannot contain consecutive special characters",
                    code="INVALID_USERNAME",
                    value=username,
                ))

        return errors

    def check_warnings(self, record: GitLabPayload) -> list[FieldWarning]:
        warnings = []

        commit_count = max(record.total_commits_count, len(record.commits))
        if commit_count > MAX_COMMIT_COUNT:
            warnings.append(FieldWarning(
                field="total_commits_count",
                message=f"Large number of commits: {commit_count}",
                code="LARGE_COMMIT_COUNT",
                suggestion="Consider squashing commits or splitting the change",
            ))

        if record.project.visibility_level == PUBLIC_VISIBILITY:
            warnings.append(FieldWarning(
                field="project.visibility_level",
                message="Project is public",
                code="PUBLIC_PROJECT",
                suggestion="Make sure no sensitive information is pushed",
            ))

        if record.object_attributes is not None:
            warnings.extend(self._merge_request_warnings(record, commit_count))

        return warnings

    def _merge_request_warnings(self, record: GitLabPayload, commit_count: int) -> list[FieldWarning]:
        mr = record.object_attributes
        warnings = change_request_warnings(
            mr.title,
            mr.description,
            title_field="object_attributes.title",
            content_field="object_attributes.description",
            kind="Merge request",
        )

        if mr.work_in_progress != bool(find_markers(mr.title, WIP_MARKERS)):
            warnings.append(FieldWarning(
                field="object_attributes.work_in_progress",
                message="work_in_progress flag does not match the title",
                code="WIP_TITLE_MISMATCH",
                suggestion="Mark the merge request as draft in both the title and the flag",
            ))

        description = (mr.description or "").strip()
        if len(description) < MIN_DESCRIPTION_LENGTH:
            warnings.append(FieldWarning(
                field="object_attributes.description",
                message="Merge request has little or no description",
                code="MISSING_DESCRIPTION",
                suggestion="Describe what changed and why",
            ))
        else:
            missing = [s for s in TEMPLATE_SECTIONS if s not in description.lower()]
            if len(missing) > MAX_MISSING_SECTIONS:
                warnings.append(FieldWarning(
                    field="object_attributes.description",
                    message=f"Description is missing template sections: {', '.join(missing)}",
                    code="INCOMPLETE_TEMPLATE",
                    suggestion="Fill in the merge request template",
                ))

        if mr.state == "opened" and not record.reviewers:
            warnings.append(FieldWarning(
                field="reviewers",
                message="No reviewers assigned",
                code="NO_REVIEWERS",
                suggestion="Assign at least one reviewer",
            ))

        age = age_in_days(mr.created_at)
        if mr.state == "opened" and age > STALE_MR_DAYS:
            warnings.append(FieldWarning(
                field="object_attributes.created_at",
                message=f"Merge request has been open for {int(age)} days",
                code="STALE_MR",
                suggestion="Merge, close or rebase stale merge requests",
            ))

        if mr.target_branch in MAIN_BRANCHES:
            warnings.append(FieldWarning(
                field="object_attributes.target_branch",
                message=f"Merge request targets '{mr.target_branch}'",
                code="MAIN_BRANCH_TARGET",
                suggestion="Make sure the change went through the usual review and CI gates",
            ))

        if not mr.squash and commit_count > SQUASH_COMMIT_COUNT:
            warnings.append(FieldWarning(
                field="object_attributes.squash",
                message=f"{commit_count} commits will be merged without squashing",
                code="SQUASH_RECOMMENDED",
                suggestion="Enable squash on merge",
            ))

        if mr.merge_status == "cannot_be_merged":
            warnings.append(FieldWarning(
                field="object_attributes.merge_status",
                message="Merge request has conflicts",
                code="MERGE_CONFLICTS",
                suggestion="Rebase onto the target branch and resolve conflicts",
            ))

        return warnings
