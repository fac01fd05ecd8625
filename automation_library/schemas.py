"""
Pydantic models for automations.

Field names are snake_case in Python and camelCase on the wire
(``studentName``, ``submissionDate``...), matching the JSON the
front-end has always exchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Link(CamelModel):
    """Titled URL attached to an automation."""
    title: str
    url: str


class Reaction(CamelModel):
    """Emoji counter on an automation."""
    emoji: str
    count: int = Field(1, ge=1)


class NewAutomationInput(CamelModel):
    """Create/update payload: an automation minus the server-assigned fields."""
    title: str
    description: str
    student_name: str
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    setup_instructions: str = ""
    installation_code: str | None = None


class Automation(NewAutomationInput):
    """A stored automation write-up."""
    id: str
    submission_date: datetime
    reactions: list[Reaction] = Field(default_factory=list)

    def content(self) -> NewAutomationInput:
        """The caller-editable fields of this automation."""
        return NewAutomationInput.model_validate(
            self.model_dump(include=set(NewAutomationInput.model_fields))
        )


class ReactionRequest(CamelModel):
    """Body of POST /api/automations/{id}/reactions."""
    emoji: str
