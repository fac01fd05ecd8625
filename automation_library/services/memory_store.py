"""
In-memory automation store for local development and tests. Not intended for prod.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from automation_library.schemas import Automation, NewAutomationInput, Reaction
from automation_library.services.demo_data import demo_automations
from automation_library.services.store import AutomationStore, validate_emoji, validate_input

logger = logging.getLogger(__name__)


class InMemoryAutomationStore(AutomationStore):
    """Automations held in a process-lifetime list.

    Every read returns deep copies, and each mutation runs under one
    ``asyncio.Lock`` so concurrent reactions never lose an increment.
    """

    def __init__(self, seed: bool = True, latency: float = 0.0):
        self.latency = latency
        self._automations: list[Automation] = demo_automations() if seed else []
        self._lock = asyncio.Lock()

    async def _simulate_latency(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def _find(self, automation_id: str) -> int | None:
        for index, automation in enumerate(self._automations):
            if automation.id == automation_id:
                return index
        return None

    async def list_all(self) -> list[Automation]:
        await self._simulate_latency()
        # Equal timestamps fall back to id, same as the database store
        ordered = sorted(
            self._automations,
            key=lambda a: (a.submission_date, a.id),
            reverse=True,
        )
        return [a.model_copy(deep=True) for a in ordered]

    async def get_by_id(self, automation_id: str) -> Automation | None:
        await self._simulate_latency()
        index = self._find(automation_id)
        if index is None:
            return None
        return self._automations[index].model_copy(deep=True)

    async def create(self, data: NewAutomationInput) -> Automation:
        validate_input(data)
        await self._simulate_latency()

        automation = Automation(
            **data.model_dump(),
            id=str(uuid.uuid4()),
            submission_date=datetime.now(timezone.utc),
            reactions=[],
        )
        async with self._lock:
            self._automations.append(automation)

        logger.info(f"Created automation {automation.id}")
        return automation.model_copy(deep=True)

    async def update(self, automation_id: str, data: NewAutomationInput) -> Automation | None:
        validate_input(data)
        await self._simulate_latency()

        async with self._lock:
            index = self._find(automation_id)
            if index is None:
                return None

            existing = self._automations[index]
            updated = Automation(
                **data.model_dump(),
                id=existing.id,
                submission_date=existing.submission_date,
                reactions=existing.reactions,
            )
            self._automations[index] = updated

        logger.info(f"Updated automation {automation_id}")
        return updated.model_copy(deep=True)

    async def add_reaction(self, automation_id: str, emoji: str) -> Automation | None:
        validate_emoji(emoji)
        await self._simulate_latency()

        async with self._lock:
            index = self._find(automation_id)
            if index is None:
                return None

            automation = self._automations[index]
            for reaction in automation.reactions:
                if reaction.emoji == emoji:
                    reaction.count += 1
                    break
            else:
                automation.reactions.append(Reaction(emoji=emoji, count=1))

            return automation.model_copy(deep=True)
