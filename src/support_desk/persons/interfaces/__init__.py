"""
Support Person Interfaces Layer
===============================

FastAPI routes for the support person module.
"""

from support_desk.persons.interfaces.controllers import router as persons_router

__all__ = ["persons_router"]
