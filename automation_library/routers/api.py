"""
JSON API over the automation store.

Payloads use camelCase field names
(``studentName``, ``setupInstructions``...). Store ``ValidationError`` and
``BackendUnavailable`` are mapped to 422/503 by the application handlers.
"""

from fastapi import APIRouter, HTTPException, Query, status

from automation_library.deps import Store
from automation_library.schemas import Automation, NewAutomationInput, ReactionRequest

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/automations", response_model=list[Automation])
async def list_automations(
    store: Store,
    tag: str | None = Query(default=None, description="Only automations with this tag"),
):
    """List automations, newest first."""
    if tag:
        return await store.list_by_tag(tag)
    return await store.list_all()


@router.get("/automations/{automation_id}", response_model=Automation)
async def get_automation(automation_id: str, store: Store):
    """Get a single automation."""
    automation = await store.get_by_id(automation_id)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return automation


@router.post("/automations", response_model=Automation, status_code=status.HTTP_201_CREATED)
async def create_automation(data: NewAutomationInput, store: Store):
    """Submit a new automation."""
    return await store.create(data)


@router.put("/automations/{automation_id}", response_model=Automation)
async def update_automation(automation_id: str, data: NewAutomationInput, store: Store):
    """Replace an automation's content. Reactions and submission date are kept."""
    automation = await store.update(automation_id, data)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return automation


@router.post("/automations/{automation_id}/reactions", response_model=Automation)
async def add_reaction(automation_id: str, body: ReactionRequest, store: Store):
    """Add one to the emoji's counter."""
    automation = await store.add_reaction(automation_id, body.emoji)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return automation


@router.get("/tags", response_model=list[str])
async def list_tags(store: Store):
    """Every tag in use, sorted."""
    return await store.all_tags()
