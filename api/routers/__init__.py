"""
API Routers for Appeal AI.

Organized by domain:
- appeals: Appeal strength assessment
- fines: Fine notice extraction from images
"""

from routers.appeals import router as appeals_router
from routers.fines import router as fines_router

__all__ = [
    "appeals_router",
    "fines_router",
]
