"""
Catalog exceptions.
"""


class CatalogError(Exception):
    """Base class for catalog failures."""


class ItemNotFoundError(CatalogError):
    """No item in the catalog carries the requested id."""

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"Product with id {item_id} not found")


class RecordParseError(CatalogError):
    """A text record could not be decoded."""

    def __init__(self, record: str, reason: str):
        self.record = record
        self.reason = reason
        super().__init__(f"Unable to parse record '{record}': {reason}")


class RestoreNotFoundError(CatalogError):
    """No snapshot file is available to restore from."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"No snapshot found in {directory}")
