"""
Support Case Interfaces Layer
=============================

FastAPI routes for the support case module.
"""

from support_desk.cases.interfaces.controllers import router as cases_router

__all__ = ["cases_router"]
