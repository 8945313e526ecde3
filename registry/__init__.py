# =============================================================================
# registry/ - Dynamic Model Registry
# =============================================================================
# This package turns model/validator module pairs into HTTP endpoints:
# - store.py: Thread-safe ModelStore (type name -> ModelInfo)
# - discovery.py: Finds payloads/<name>.py + validations/<name>.py pairs
# - adapter.py: Calls any validator shape and normalizes its result
# - endpoints.py: Registers POST /validate/{type} routes
#
# get_registry() returns the process-wide store, discovering models on
# first use.
# =============================================================================

import logging
import threading

from .discovery import (
    DiscoveryEngine,
    DiscoveryError,
    DiscoveryReport,
    ShapeNotFoundError,
    ValidatorNotFoundError,
    discover_and_register_all,
)
from .store import ModelStore

logger = logging.getLogger(__name__)

_registry: ModelStore | None = None
_registry_lock = threading.Lock()


def get_registry() -> ModelStore:
    """
    Get the shared ModelStore, running discovery on first call.

    Concurrent first callers all receive the same instance.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                store = ModelStore()
                report = discover_and_register_all(store)
                if report.errors:
                    logger.warning(f"{len(report.errors)} model type(s) failed discovery")
                _registry = store
    return _registry


__all__ = [
    "DiscoveryEngine",
    "DiscoveryError",
    "DiscoveryReport",
    "ModelStore",
    "ShapeNotFoundError",
    "ValidatorNotFoundError",
    "discover_and_register_all",
    "get_registry",
]
