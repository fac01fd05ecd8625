"""Exceptions raised by the automation store."""


class AutomationStoreError(Exception):
    """Base exception for store operations."""
    pass


class BackendUnavailable(AutomationStoreError):
    """The storage backend is misconfigured or cannot be reached."""
    pass


class ValidationError(AutomationStoreError):
    """Create/update payload is missing required fields. Raised before any write."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid automation: {fields}")
