"""
FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from automation_library.services.store import AutomationStore


def get_store(request: Request) -> AutomationStore:
    """The store created during application startup."""
    return request.app.state.store


# Type alias for store dependency
Store = Annotated[AutomationStore, Depends(get_store)]
