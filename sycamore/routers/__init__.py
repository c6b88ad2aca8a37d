"""
Sycamore API Routers.

All routers are imported here for easy access.
"""

from sycamore.routers.devotional import router as devotional_router

__all__ = [
    "devotional_router",
]
