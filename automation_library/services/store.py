"""
Automation store contract.

The web layer talks only to ``AutomationStore``. Two implementations exist:
``InMemoryAutomationStore`` (seeded, process-lifetime, used for local
development and tests) and ``DatabaseAutomationStore`` (SQLAlchemy async).
Both return fully assembled ``Automation`` objects and signal a missing
record with ``None`` rather than an exception.
"""

from abc import ABC, abstractmethod
from urllib.parse import urlparse

from automation_library.schemas import Automation, NewAutomationInput
from automation_library.services.errors import BackendUnavailable, ValidationError
from automation_library.settings import Settings

REQUIRED_TEXT_FIELDS = ("title", "description", "student_name")

# Link and image URLs end up in href/src attributes
ALLOWED_URL_SCHEMES = {"http", "https"}


def is_web_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    parsed = urlparse(value.strip())
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


def validate_input(data: NewAutomationInput) -> None:
    """Reject payloads with blank required text fields or non-http(s) URLs.

    Raises:
        ValidationError: mapping of field name to message
    """
    errors = {}
    for name in REQUIRED_TEXT_FIELDS:
        value = getattr(data, name)
        if not value or not value.strip():
            errors[name] = "This field is required."
    if any(not is_web_url(link.url) for link in data.links):
        errors["links"] = "Link URLs must start with http:// or https://."
    if any(not is_web_url(image) for image in data.images):
        errors["images"] = "Image URLs must start with http:// or https://."
    if errors:
        raise ValidationError(errors)


def validate_emoji(emoji: str) -> None:
    if not emoji or not emoji.strip():
        raise ValidationError({"emoji": "This field is required."})


class AutomationStore(ABC):
    """Persistence boundary for automations."""

    @abstractmethod
    async def list_all(self) -> list[Automation]:
        """All automations, newest submission first."""
        raise NotImplementedError

    async def list_by_tag(self, tag: str) -> list[Automation]:
        """Automations carrying ``tag``, in ``list_all`` order."""
        return [a for a in await self.list_all() if tag in a.tags]

    @abstractmethod
    async def get_by_id(self, automation_id: str) -> Automation | None:
        """Fetch an automation by id, or None if missing."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, data: NewAutomationInput) -> Automation:
        """Persist a new automation and return it as stored."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, automation_id: str, data: NewAutomationInput) -> Automation | None:
        """Replace the content fields of an automation; id, date and reactions are kept."""
        raise NotImplementedError

    @abstractmethod
    async def add_reaction(self, automation_id: str, emoji: str) -> Automation | None:
        """Increment the counter for ``emoji``, creating it at 1 if absent."""
        raise NotImplementedError

    async def all_tags(self) -> list[str]:
        """Sorted, de-duplicated union of every automation's tags."""
        tags: set[str] = set()
        for automation in await self.list_all():
            tags.update(automation.tags)
        return sorted(tags)

    async def close(self) -> None:
        """Release backend resources."""
        return None


async def build_store(settings: Settings) -> AutomationStore:
    """Create the store selected by ``settings.store_backend``.

    Raises:
        BackendUnavailable: database backend selected without DATABASE_URL
    """
    if settings.store_backend == "memory":
        from automation_library.services.memory_store import InMemoryAutomationStore

        return InMemoryAutomationStore(
            seed=settings.seed_demo_data,
            latency=settings.mock_latency_seconds,
        )

    if not settings.database_configured:
        raise BackendUnavailable(
            "Missing DATABASE_URL for the database store. "
            "Set DATABASE_URL or use STORE_BACKEND=memory for local development."
        )

    from automation_library.db import create_engine, create_session_maker, init_db
    from automation_library.services.database_store import DatabaseAutomationStore, backend_errors

    engine = create_engine(settings.database_url, settings)
    async with backend_errors("init_db"):
        await init_db(engine)
    return DatabaseAutomationStore(create_session_maker(engine), engine=engine)
