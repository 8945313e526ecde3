# =============================================================================
# registry/endpoints.py - Per-Model HTTP Endpoint Generator
# =============================================================================
# Registers one POST /validate/{type_name} route per registered model type.
#
# Each route:
#   1. Decodes the raw body as a JSON object (anything else -> 400 BAD_PAYLOAD)
#   2. Populates a fresh instance of the model's data shape
#   3. Runs the validator through the universal adapter
#   4. Returns the ValidationResult: 200 if valid, 422 if not
#
# Routes must be added before the catch-all /validate/{model_type} route,
# otherwise the catch-all shadows them. app.main.create_app takes care of it.
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.exceptions import BadPayloadError
from core.models.validation import ValidationResult
from registry import adapter
from registry.store import ModelStore

logger = logging.getLogger(__name__)


def decode_record(raw: bytes, model_type: str | None = None) -> dict[str, Any]:
    """
    Decode a request body into a record mapping.

    Raises:
        BadPayloadError: If the body isn't JSON or isn't a JSON object
    """
    try:
        decoded = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadPayloadError(str(e), model_type=model_type)

    if not isinstance(decoded, dict):
        raise BadPayloadError(
            f"expected a JSON object, got {type(decoded).__name__}",
            model_type=model_type,
        )
    return decoded


def validation_response(result: ValidationResult) -> JSONResponse:
    return JSONResponse(
        status_code=200 if result.is_valid else 422,
        content=result.model_dump(mode="json"),
    )


def _make_handler(store: ModelStore, type_name: str):
    async def validate_model(request: Request) -> JSONResponse:
        # Look up per request so a re-registered type takes effect
        info = store.get(type_name)
        fields = decode_record(await request.body(), model_type=type_name)
        instance = info.new_instance(fields)

        result = await run_in_threadpool(adapter.validate, info.validator, instance, type_name)
        result.request_id = request.headers.get("X-Request-ID")

        logger.debug(
            f"{type_name}: valid={result.is_valid} errors={len(result.errors)} "
            f"warnings={len(result.warnings)}"
        )
        return validation_response(result)

    validate_model.__name__ = f"validate_{type_name}"
    return validate_model


def register_http_endpoints(router: APIRouter, store: ModelStore) -> int:
    """
    Add POST /validate/{type_name} to `router` for every registered model.

    Returns:
        Number of routes registered
    """
    count = 0
    for info in store.list():
        router.add_api_route(
            info.endpoint,
            _make_handler(store, info.type_name),
            methods=["POST"],
            name=f"validate_{info.type_name}",
            summary=f"Validate {info.display_name}",
            description=info.description,
            response_model=ValidationResult,
            responses={
                422: {"model": ValidationResult, "description": "Record failed validation"},
                400: {"description": "Body is not a JSON object"},
            },
        )
        logger.info(f"Registered endpoint: POST {info.endpoint}")
        count += 1
    return count
