# Models package
from automation_library.db import Base
from automation_library.models.automation import (
    AutomationLink,
    AutomationReaction,
    AutomationRecord,
)

__all__ = [
    "Base",
    "AutomationRecord",
    "AutomationLink",
    "AutomationReaction",
]
