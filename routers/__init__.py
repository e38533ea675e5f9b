# Marketplace Routers Module
# Exports all modular API routers for the marketplace

from routers.auth import router as auth_router
from routers.campaigns import router as campaigns_router
from routers.applications import router as applications_router
from routers.reviews import router as reviews_router
from routers.messages import router as conversations_router
from routers.notifications import router as notifications_router
from routers.creators import router as creators_router
from routers.venues import router as venues_router

__all__ = [
    'auth_router',
    'campaigns_router',
    'applications_router',
    'reviews_router',
    'conversations_router',
    'notifications_router',
    'creators_router',
    'venues_router',
]
