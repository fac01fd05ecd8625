from automation_library.services.errors import (
    AutomationStoreError,
    BackendUnavailable,
    ValidationError,
)
from automation_library.services.store import AutomationStore, build_store

__all__ = [
    "AutomationStore",
    "AutomationStoreError",
    "BackendUnavailable",
    "ValidationError",
    "build_store",
]
