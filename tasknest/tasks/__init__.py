"""
TaskNest API - Tasks Module

Owner-scoped CRUD over the persisted task collection.
"""

from tasknest.tasks.router import router as tasks_router

__all__ = ["tasks_router"]
