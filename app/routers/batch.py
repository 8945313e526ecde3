# =============================================================================
# app/routers/batch.py - Batch Session Endpoints
# =============================================================================
# A batch spreads one validation job across many requests:
#
#   POST /validate/batch/start          -> open a session
#   POST /validate  (X-Batch-ID: <id>)  -> send chunks (see validation.py)
#   GET  /validate/batch/{id}           -> running totals
#   POST /validate/batch/{id}/complete  -> final verdict against the threshold
#
# Included before the per-model router so "batch" never reads as a model type.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import BatchManagerDep, StoreDep
from app.routers.validation import completion_response
from core.models.batch import BatchSnapshot, BatchStartRequest, BatchStartResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/validate/batch/start", response_model=BatchStartResponse)
def start_batch(request: BatchStartRequest, store: StoreDep, manager: BatchManagerDep):
    """
    Open a batch session for a registered model type.

    Raises:
        ModelNotFoundError: If model_type isn't registered (404)
    """
    store.get(request.model_type)

    session = manager.start(
        request.model_type,
        threshold=request.threshold,
        job_id=request.job_id,
    )
    return BatchStartResponse(
        batch_id=session.batch_id,
        model_type=session.model_type,
        job_id=session.job_id,
        started_at=session.started_at,
        expires_at=session.expires_at,
        threshold=session.threshold,
    )


@router.get("/validate/batch/{batch_id}", response_model=BatchSnapshot)
def get_batch(batch_id: str, manager: BatchManagerDep):
    """
    Current totals of a batch.

    Raises:
        BatchNotFoundError: If the batch doesn't exist (404)
    """
    return manager.status(batch_id)


@router.post("/validate/batch/{batch_id}/complete")
def complete_batch(batch_id: str, manager: BatchManagerDep):
    """
    Finalize a batch: 200 if it met its threshold, 422 if not.

    Calling it again returns the same verdict until the session is removed.
    """
    return completion_response(manager, batch_id)
