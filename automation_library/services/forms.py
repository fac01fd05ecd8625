"""
Submit/edit form intake.

Browsers post tags as one comma-separated field and links/images as
repeated inputs; this turns that into a ``NewAutomationInput``.
"""

from dataclasses import dataclass, field

from automation_library.schemas import Automation, Link, NewAutomationInput


@dataclass
class AutomationForm:
    """Raw form values, as posted."""

    title: str = ""
    description: str = ""
    student_name: str = ""
    setup_instructions: str = ""
    installation_code: str = ""
    tags: str = ""
    link_titles: list[str] = field(default_factory=list)
    link_urls: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)

    @classmethod
    def from_automation(cls, automation: Automation) -> "AutomationForm":
        """Prefill an edit form."""
        return cls(
            title=automation.title,
            description=automation.description,
            student_name=automation.student_name,
            setup_instructions=automation.setup_instructions,
            installation_code=automation.installation_code or "",
            tags=", ".join(automation.tags),
            link_titles=[link.title for link in automation.links],
            link_urls=[link.url for link in automation.links],
            images=list(automation.images),
        )


def split_tags(raw: str) -> list[str]:
    """Comma-separated tags, trimmed, blanks dropped."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def parse_automation_form(form: AutomationForm) -> NewAutomationInput:
    """Build the store payload from a posted form.

    Link rows missing either a title or a URL are dropped, as are blank
    image URLs. An empty installation command becomes ``None``.
    """
    links = [
        Link(title=title.strip(), url=url.strip())
        for title, url in zip(form.link_titles, form.link_urls)
        if title.strip() and url.strip()
    ]
    images = [image.strip() for image in form.images if image.strip()]

    return NewAutomationInput(
        title=form.title.strip(),
        description=form.description.strip(),
        student_name=form.student_name.strip(),
        setup_instructions=form.setup_instructions,
        installation_code=form.installation_code.strip() or None,
        tags=split_tags(form.tags),
        links=links,
        images=images,
    )
