"""Store exceptions."""


class StoreError(Exception):
    """Base class for workspace store failures."""


class NotFoundError(StoreError):
    """A referenced record does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class DuplicateEntryError(StoreError):
    """A notebook already contains the thought product."""
