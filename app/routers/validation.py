# =============================================================================
# app/routers/validation.py - Generic Validation Endpoints
# =============================================================================
# POST /validate accepts {model_type, payload | data, threshold?}:
#   payload -> single record, ValidationResult (200 valid / 422 invalid)
#   data    -> array of records, ArrayValidationResult (200 success / 422 failed)
#
# Batch headers turn the same request into a batch chunk:
#   X-Batch-ID: <id>        - validate and add the counts to the batch
#   X-Batch-Complete: <id>  - add any records, then finalize the batch
#
# POST /validate/{model_type} is a catch-all for types WITHOUT a generated
# route; it must be included after the per-model router.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import BatchManagerDep, StoreDep
from app.exceptions import InvalidRequestError, ModelNotFoundError
from core.models.array import ArrayValidationResult, RunStatus
from core.models.batch import BatchChunkResponse, BatchCompleteResponse, BatchState
from core.services.array_validator import validate_array, validate_record
from core.services.batch_session_service import BatchSessionManager
from registry.endpoints import validation_response
from registry.store import ModelStore

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class ValidateRequest(BaseModel):
    """
    Body of POST /validate.

    Example (array with threshold):
        {
            "model_type": "incident",
            "data": [{...}, {...}],
            "threshold": 80.0
        }
    """
    model_type: str = Field(..., min_length=1, description="Registered model type")
    payload: dict[str, Any] | None = Field(default=None, description="A single record")
    data: list[Any] | None = Field(default=None, description="A list of records")
    threshold: float | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Minimum success rate (percent) for array runs"
    )

    @property
    def records(self) -> list[Any] | None:
        """Records to accumulate into a batch, whichever form was sent."""
        if self.data is not None:
            return self.data
        if self.payload is not None:
            return [self.payload]
        return None


# =============================================================================
# Helpers
# =============================================================================

def completion_response(manager: BatchSessionManager, batch_id: str) -> JSONResponse:
    """Finalize a batch and render the verdict (200 success / 422 failed)."""
    snapshot = manager.finalize(batch_id)
    response = BatchCompleteResponse.from_snapshot(snapshot)
    return JSONResponse(
        status_code=200 if response.status == BatchState.SUCCESS else 422,
        content=response.model_dump(mode="json"),
    )


def accumulate_chunk(
    store: ModelStore,
    manager: BatchSessionManager,
    batch_id: str,
    body: ValidateRequest,
) -> ArrayValidationResult:
    """
    Validate a chunk (no threshold) and add its counts to a batch.

    Raises:
        BatchNotFoundError: If the batch doesn't exist
        InvalidRequestError: If the chunk's model_type differs from the batch's
    """
    snapshot = manager.status(batch_id)
    if body.model_type != snapshot.model_type:
        raise InvalidRequestError(
            f"Batch {batch_id} validates '{snapshot.model_type}', got '{body.model_type}'",
            suggestion="Send every chunk of a batch with the same model_type",
        )

    result = validate_array(
        store,
        body.model_type,
        body.records or [],
        batch_id=batch_id,
        max_records=settings.MAX_ARRAY_RECORDS,
    )
    manager.update(
        batch_id,
        valid=result.valid_records,
        invalid=result.invalid_records,
        warnings=result.warning_records,
    )
    return result


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/validate")
def validate(
    store: StoreDep,
    manager: BatchManagerDep,
    body: Annotated[ValidateRequest | None, Body()] = None,
    x_batch_id: Annotated[str | None, Header()] = None,
    x_batch_complete: Annotated[str | None, Header()] = None,
):
    """
    Validate a single record, an array of records, or a batch chunk.

    Plain `def` so FastAPI runs it on the worker thread pool.
    """
    if x_batch_complete:
        if body is not None and body.records:
            accumulate_chunk(store, manager, x_batch_complete, body)
        return completion_response(manager, x_batch_complete)

    if body is None:
        raise InvalidRequestError(
            "Request body is required",
            suggestion="Send {model_type, payload} or {model_type, data}",
        )

    if x_batch_id:
        if body.records is None:
            raise InvalidRequestError(
                "Batch chunks need 'data' or 'payload'",
                suggestion="Send the chunk's records under 'data'",
            )
        chunk = accumulate_chunk(store, manager, x_batch_id, body)
        return BatchChunkResponse(
            batch_id=x_batch_id,
            total_records=chunk.total_records,
            valid_records=chunk.valid_records,
            invalid_records=chunk.invalid_records,
            warning_records=chunk.warning_records,
        )

    if body.payload is not None and body.data is not None:
        raise InvalidRequestError(
            "Send either 'payload' or 'data', not both",
            suggestion="Use 'payload' for one record and 'data' for a list",
        )

    if body.payload is not None:
        result = validate_record(store, body.model_type, body.payload)
        return validation_response(result)

    if body.data is not None:
        result = validate_array(
            store,
            body.model_type,
            body.data,
            threshold=body.threshold,
            max_records=settings.MAX_ARRAY_RECORDS,
        )
        return JSONResponse(
            status_code=200 if result.status == RunStatus.SUCCESS else 422,
            content=result.model_dump(mode="json"),
        )

    raise InvalidRequestError(
        "Either 'payload' or 'data' is required",
        suggestion="Use 'payload' for one record and 'data' for a list",
    )


@router.post("/validate/{model_type}", include_in_schema=False)
def validate_unknown_model(model_type: str):
    """Catch-all for model types that have no generated route."""
    raise ModelNotFoundError(model_type)
