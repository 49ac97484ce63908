from cardsmith.api.cards import router as cards_router
from cardsmith.api.designs import router as designs_router
from cardsmith.api.files import router as files_router
from cardsmith.api.health import router as health_router

__all__ = [
    "cards_router",
    "designs_router",
    "files_router",
    "health_router",
]
