"""
NOC Registry - API routers
app/api/__init__.py
"""

from .noc import router as noc_router

__all__ = [
    "noc_router",
]
