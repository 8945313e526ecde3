# =============================================================================
# core/models/batch.py - Batch Session Schemas
# =============================================================================
# These models define the API contract for multi-request batch validation:
# - BatchStartRequest / BatchStartResponse: open a session
# - BatchChunkResponse: acknowledgement for one accumulated chunk
# - BatchSnapshot: point-in-time view of a session (status endpoint)
# - BatchCompleteResponse: final verdict once the batch is completed
#
# Flow:
# 1. POST /validate/batch/start           -> batch_id
# 2. POST /validate (X-Batch-ID: id) x N  -> counts accumulate
# 3. POST /validate/batch/{id}/complete   -> success / failed vs threshold
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

# Job IDs become the batch ID prefix, which is a URL path segment
JOB_ID_PATTERN = r"^[A-Za-z0-9_.-]+$"


class BatchState(str, Enum):
    """
    Lifecycle state of a batch session.

    State machine:
        active -> success
               `-> failed

    - active: accepting chunks
    - success / failed: finalized; deleted shortly afterwards
    """
    ACTIVE = "active"
    SUCCESS = "success"
    FAILED = "failed"


class BatchStartRequest(BaseModel):
    """
    Schema for starting a batch session.

    Example:
        {"model_type": "incident", "job_id": "nightly-import", "threshold": 95.0}
    """

    model_type: str = Field(..., min_length=1, description="Registered model type for all chunks")
    job_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        pattern=JOB_ID_PATTERN,
        description="Optional caller job name (letters, digits, _ . -), used as the batch ID prefix"
    )
    threshold: float | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Minimum success rate (percent) required at completion"
    )


class BatchStartResponse(BaseModel):
    """Response when a batch session is opened."""

    batch_id: str
    status: BatchState = BatchState.ACTIVE
    model_type: str
    job_id: str | None = None
    started_at: datetime
    expires_at: datetime = Field(..., description="When the session expires if left idle")
    threshold: float | None = None


class BatchSnapshot(BaseModel):
    """
    Point-in-time view of a batch session.

    Returned by GET /validate/batch/{id}. `status` stays "active" until the
    batch is completed.
    """

    batch_id: str
    model_type: str
    job_id: str | None = None
    status: BatchState
    threshold: float | None = None
    total_records: int = Field(default=0, ge=0)
    valid_records: int = Field(default=0, ge=0)
    invalid_records: int = Field(default=0, ge=0)
    warning_records: int = Field(default=0, ge=0)
    success_rate: float = Field(default=0.0, ge=0, le=100)
    started_at: datetime
    last_updated_at: datetime
    expires_at: datetime
    is_final: bool = False
    completed_at: datetime | None = None


class BatchChunkResponse(BaseModel):
    """Acknowledgement for one chunk accumulated into a batch."""

    batch_id: str
    chunk_processed: bool = True
    status: str = "accumulating"
    total_records: int = Field(default=0, ge=0)
    valid_records: int = Field(default=0, ge=0)
    invalid_records: int = Field(default=0, ge=0)
    warning_records: int = Field(default=0, ge=0)


class BatchCompleteResponse(BaseModel):
    """
    Final verdict for a completed batch.

    Mirrors the array summary fields, plus batch_id and completed_at.
    """

    batch_id: str
    status: BatchState
    threshold: float | None = None
    success_rate: float = Field(default=0.0, ge=0, le=100)
    total_records: int = Field(default=0, ge=0)
    valid_records: int = Field(default=0, ge=0)
    invalid_records: int = Field(default=0, ge=0)
    warning_records: int = Field(default=0, ge=0)
    started_at: datetime
    completed_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: BatchSnapshot) -> "BatchCompleteResponse":
        return cls(
            batch_id=snapshot.batch_id,
            status=snapshot.status,
            threshold=snapshot.threshold,
            success_rate=snapshot.success_rate,
            total_records=snapshot.total_records,
            valid_records=snapshot.valid_records,
            invalid_records=snapshot.invalid_records,
            warning_records=snapshot.warning_records,
            started_at=snapshot.started_at,
            completed_at=snapshot.completed_at or snapshot.last_updated_at,
        )
