"""API route modules."""

from .entries import router as entries_router
from .health import router as health_router
from .periods import router as periods_router
from .settings import router as settings_router
from .transfer import router as transfer_router

__all__ = [
    "entries_router",
    "health_router",
    "periods_router",
    "settings_router",
    "transfer_router",
]
