"""API routes."""

from edqorta.api.routes.conversations import router as conversations_router
from edqorta.api.routes.health import router as health_router
from edqorta.api.routes.notifications import router as notifications_router
from edqorta.api.routes.properties import router as properties_router
from edqorta.api.routes.tours import router as tours_router
from edqorta.api.routes.users import router as users_router

__all__ = [
    "conversations_router",
    "health_router",
    "notifications_router",
    "properties_router",
    "tours_router",
    "users_router",
]
