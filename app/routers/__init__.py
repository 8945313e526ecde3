# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - batch.py: Batch session start / status / complete
# - validation.py: Generic POST /validate and the unknown-type catch-all
# - models.py: Registered model listing
#
# Per-model POST /validate/{type} routes are generated at startup by
# registry.endpoints. Router order matters; see main.create_app().
# =============================================================================

from . import health
from . import batch
from . import validation
from . import models

__all__ = [
    "health",
    "batch",
    "validation",
    "models",
]
