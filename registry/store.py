# =============================================================================
# registry/store.py - Model Descriptor Store
# =============================================================================
# Thread-safe map from model type name to ModelInfo.
#
# Locking:
#   get / list / is_registered -> shared (read) lock, never block each other
#   register / unregister      -> exclusive (write) lock
#
# Writes only happen at startup, so readers see essentially no contention.
#
# Usage:
#   store = ModelStore()
#   store.register(info)
#   info = store.get("incident")      # raises ModelNotFoundError if absent
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from app.exceptions import ModelNotFoundError
from core.models.model_info import ModelInfo
from lib.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


class ModelStore:
    """
    Registry of model descriptors keyed by type name.

    Entries are immutable; registering an existing type replaces it.
    """

    def __init__(self) -> None:
        self._models: dict[str, ModelInfo] = {}
        self._lock = ReadWriteLock()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def register(self, info: ModelInfo) -> None:
        """
        Register (or replace) a model descriptor.

        Raises:
            ValueError: If info.type_name is empty
        """
        if not info.type_name:
            raise ValueError("model type cannot be empty")

        with self._lock.write_locked():
            replaced = info.type_name in self._models
            self._models[info.type_name] = info

        if replaced:
            logger.info(f"Replaced model: {info.type_name} -> {info.display_name}")
        else:
            logger.info(f"Registered model: {info.type_name} -> {info.display_name}")

    def unregister(self, type_name: str) -> None:
        """
        Remove a model descriptor.

        Raises:
            ModelNotFoundError: If the type is not registered (nothing changes)
        """
        with self._lock.write_locked():
            if type_name not in self._models:
                raise ModelNotFoundError(type_name)
            del self._models[type_name]

        logger.info(f"Unregistered model: {type_name}")

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, type_name: str) -> ModelInfo:
        """
        Look up a model descriptor.

        Raises:
            ModelNotFoundError: If the type is not registered
        """
        with self._lock.read_locked():
            info = self._models.get(type_name)
        if info is None:
            raise ModelNotFoundError(type_name)
        return info

    def is_registered(self, type_name: str) -> bool:
        with self._lock.read_locked():
            return type_name in self._models

    def list(self) -> list[ModelInfo]:
        """Snapshot of all descriptors, sorted by type name."""
        with self._lock.read_locked():
            return sorted(self._models.values(), key=lambda info: info.type_name)

    def type_names(self) -> list[str]:
        with self._lock.read_locked():
            return sorted(self._models)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._models)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and self.is_registered(type_name)

    def stats(self) -> dict[str, Any]:
        """Registry statistics for diagnostics."""
        names = self.type_names()
        return {
            "total_models": len(names),
            "model_types": names,
        }
