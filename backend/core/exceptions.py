"""Domain error classes.

Routes translate these into HTTP responses at the call site; nothing here
knows about HTTP. An access denial is not an error and has no class here.
"""


class StoreError(Exception):
    """The backing store rejected or failed an operation.

    ``message`` is safe to show to an admin; the original exception (if any)
    is chained for the logs.
    """

    def __init__(self, message: str, collection: str | None = None) -> None:
        self.message = message
        self.collection = collection
        super().__init__(message)


class BulkImportError(Exception):
    """Fatal bulk-import failure: nothing was written."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ImportSchemaError(BulkImportError):
    """Payload shape is wrong (missing CSV columns, JSON not an array)."""


class ImportValidationError(BulkImportError):
    """Payload parsed but nothing in it can be imported."""


class UnknownTierError(ValueError):
    """An unrecognised tier name reached an access check in strict mode."""

    def __init__(self, tier_name: str) -> None:
        self.tier_name = tier_name
        super().__init__(f"Unknown subscription tier: {tier_name!r}")
