"""
Routers Module

API routers for the TCVS automation application.
"""

from .tcvs import router as tcvs_router

__all__ = ["tcvs_router"]
