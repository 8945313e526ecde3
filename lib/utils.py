# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Timestamps (always timezone-aware UTC)
# - Batch ID generation
# - Record identifier detection for array validation
# - Name casing helpers used by model discovery
# =============================================================================

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Any, Mapping


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def elapsed_ms(started: float, finished: float) -> float:
    """
    Convert two time.perf_counter() readings to elapsed milliseconds.

    Rounded to three decimals so responses stay readable.
    """
    return round((finished - started) * 1000.0, 3)


# =============================================================================
# Identifier Utilities
# =============================================================================

# Field names checked (in order) when looking for a record's own identifier
RECORD_ID_FIELDS = ("id", "ID", "_id", "uuid", "UUID", "identifier", "recordId", "record_id")


def generate_batch_id(prefix: str = "batch") -> str:
    """
    Generate a unique batch ID with a given prefix.

    Example:
        generate_batch_id("auto")     # "auto_9f86d081884c7d65"
        generate_batch_id("job-42")   # "job-42_2c26b46b68ffc68f"
    """
    return f"{prefix}_{secrets.token_hex(8)}"


def detect_record_identifier(record: Any, row_index: int) -> str:
    """
    Find a human-meaningful identifier for a record.

    Checks the common ID fields in RECORD_ID_FIELDS and falls back to
    "row_<index>" when none is present (or the record is not a mapping).
    """
    if isinstance(record, Mapping):
        for key in RECORD_ID_FIELDS:
            value = record.get(key)
            if value is not None and value != "":
                return str(value)
    return f"row_{row_index}"


# =============================================================================
# Name Casing
# =============================================================================

def to_title_case(value: str) -> str:
    """
    Title-case a base name, dropping separators.

    Each word is capitalized and the rest lower-cased; '_', '-' and spaces
    separate words and are removed.

    Example:
        to_title_case("incident")        # "Incident"
        to_title_case("user_profile")    # "UserProfile"
        to_title_case("api-gateway")     # "ApiGateway"
    """
    words = value.replace("-", " ").replace("_", " ").split()
    return "".join(word[:1].upper() + word[1:].lower() for word in words)


def to_display_words(value: str) -> str:
    """
    Human-readable form of a base name ("user_profile" -> "User Profile").
    """
    words = value.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)
