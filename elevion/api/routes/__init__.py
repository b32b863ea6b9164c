# API Routes Module
from elevion.api.routes import (
    client_previews,
    subscriptions,
    marketplace,
    advertisements,
    search,
    feedback,
    mockups,
    contact,
    analytics,
    pricing,
)

__all__ = [
    "client_previews",
    "subscriptions",
    "marketplace",
    "advertisements",
    "search",
    "feedback",
    "mockups",
    "contact",
    "analytics",
    "pricing",
]
