"""
HTML pages: home, browse, detail with reactions, submit and edit forms.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from automation_library.deps import Store
from automation_library.services.errors import ValidationError
from automation_library.services.forms import AutomationForm, parse_automation_form
from automation_library.templates_config import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


async def _read_form(request: Request) -> AutomationForm:
    form = await request.form()
    return AutomationForm(
        title=str(form.get("title", "")),
        description=str(form.get("description", "")),
        student_name=str(form.get("student_name", "")),
        setup_instructions=str(form.get("setup_instructions", "")),
        installation_code=str(form.get("installation_code", "")),
        tags=str(form.get("tags", "")),
        link_titles=[str(v) for v in form.getlist("link_title")],
        link_urls=[str(v) for v in form.getlist("link_url")],
        images=[str(v) for v in form.getlist("image")],
    )


def _render_form(
    request: Request,
    form: AutomationForm,
    action: str,
    heading: str,
    errors: dict[str, str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "automations/form.html",
        {
            "form": form,
            "action": action,
            "heading": heading,
            "errors": errors or {},
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Landing page."""
    return templates.TemplateResponse(request, "home.html", {})


@router.get("/browse", response_class=HTMLResponse)
async def browse(
    request: Request,
    store: Store,
    tag: str | None = Query(default=None),
):
    """All automations with a tag filter."""
    automations = await store.list_all()
    all_tags = await store.all_tags()
    shown = await store.list_by_tag(tag) if tag else automations

    return templates.TemplateResponse(
        request,
        "automations/browse.html",
        {
            "automations": shown,
            "total": len(automations),
            "all_tags": all_tags,
            "selected_tag": tag,
        },
    )


@router.get("/submit", response_class=HTMLResponse)
async def submit_form(request: Request):
    """Blank submission form."""
    return _render_form(request, AutomationForm(), "/submit", "Submit Your Automation")


@router.post("/submit", response_class=HTMLResponse)
async def submit(request: Request, store: Store):
    """Create an automation from the posted form."""
    form = await _read_form(request)
    try:
        automation = await store.create(parse_automation_form(form))
    except ValidationError as e:
        return _render_form(
            request, form, "/submit", "Submit Your Automation",
            errors=e.errors, status_code=422,
        )

    logger.info(f"Automation {automation.id} submitted by {automation.student_name}")
    return RedirectResponse(url="/browse", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/automation/{automation_id}", response_class=HTMLResponse)
async def automation_detail(request: Request, automation_id: str, store: Store):
    """Automation detail with rendered setup instructions and reactions."""
    automation = await store.get_by_id(automation_id)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")

    return templates.TemplateResponse(
        request,
        "automations/detail.html",
        {"automation": automation},
    )


@router.post("/automation/{automation_id}/reactions")
async def react(
    automation_id: str,
    store: Store,
    emoji: Annotated[str, Form()],
):
    """Add a reaction and go back to the detail page."""
    automation = await store.add_reaction(automation_id, emoji)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return RedirectResponse(
        url=f"/automation/{automation_id}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/automation/{automation_id}/edit", response_class=HTMLResponse)
async def edit_form(request: Request, automation_id: str, store: Store):
    """Edit form prefilled with the stored automation."""
    automation = await store.get_by_id(automation_id)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")

    return _render_form(
        request,
        AutomationForm.from_automation(automation),
        f"/automation/{automation_id}/edit",
        "Edit Automation",
    )


@router.post("/automation/{automation_id}/edit", response_class=HTMLResponse)
async def edit(request: Request, automation_id: str, store: Store):
    """Save the edit form."""
    form = await _read_form(request)
    try:
        automation = await store.update(automation_id, parse_automation_form(form))
    except ValidationError as e:
        return _render_form(
            request, form, f"/automation/{automation_id}/edit", "Edit Automation",
            errors=e.errors, status_code=422,
        )

    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return RedirectResponse(
        url=f"/automation/{automation_id}",
        status_code=status.HTTP_303_SEE_OTHER,
    )
