# =============================================================================
# validations/database.py - Database Query Validator
# =============================================================================

import re

from core.models.validation import FieldError, FieldWarning
from payloads.database import DatabaseQuery
from validations.base import BaseValidator

SELECT_STAR = re.compile(r"\bselect\s+\*", re.IGNORECASE)
WHERE_CLAUSE = re.compile(r"\bwhere\b", re.IGNORECASE)


class DatabaseValidator(BaseValidator):
    """Audits database queries before they run."""

    shape = DatabaseQuery
    model_type = "database"

    def check_rules(self, record: DatabaseQuery) -> list[FieldError]:
        errors = []

        first_word = record.query.strip().split(None, 1)[0].upper() if record.query.strip() else ""
        if first_word != record.operation:
            errors.append(FieldError(
                field="operation",
                message=f"Operation {record.operation} does not match the query ({first_word or 'empty'})",
                code="OPERATION_MISMATCH",
                value=record.operation,
            ))

        return errors

    def check_warnings(self, record: DatabaseQuery) -> list[FieldWarning]:
        warnings = []

        if record.operation == "SELECT" and SELECT_STAR.search(record.query):
            warnings.append(FieldWarning(
                field="query",
                message="Query selects all columns",
                code="SELECT_STAR",
                suggestion="List the columns you need",
            ))

        if record.operation in ("UPDATE", "DELETE") and not WHERE_CLAUSE.search(record.query):
            warnings.append(FieldWarning(
                field="query",
                message=f"{record.operation} without a WHERE clause affects every row",
                code="UNBOUNDED_WRITE",
                suggestion="Add a WHERE clause or confirm the full-table change",
            ))

        if record.operation == "DROP":
            warnings.append(FieldWarning(
                field="operation",
                message="DROP statements are irreversible",
                code="DESTRUCTIVE_OPERATION",
                suggestion="Take a backup before running this query",
            ))

        if record.operation == "SELECT" and record.row_limit is None:
            warnings.append(FieldWarning(
                field="row_limit",
                message="SELECT has no row limit",
                code="NO_ROW_LIMIT",
                suggestion="Set row_limit to protect the database from large scans",
            ))

        return warnings
