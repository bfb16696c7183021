"""HTTP API routers."""
from lifecycle.api import workflows

__all__ = ["workflows"]
