"""Domain exceptions shared by services and API handlers."""


class ValidationError(ValueError):
    """Input to the billing calculator is malformed.

    Raised for unparsable dates and for negative or non-finite numbers,
    always before any billing is computed.
    """


class NotFoundError(LookupError):
    """A reading or price schedule id does not exist in the store."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} '{item_id}' not found")
        self.kind = kind
        self.item_id = item_id


class StorageError(RuntimeError):
    """The persistence backend failed to read or write."""
