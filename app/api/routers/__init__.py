"""
app/api/routers package marker.
"""

from app.api.routers.dashboard_stats import router as dashboard_stats_router
from app.api.routers.products import router as products_router

__all__ = [
    "dashboard_stats_router",
    "products_router",
]
