"""
Exceptions raised by the catalog.

A catalog operation aborts on a delete attempted with an account id
other than the caller's own, on a listing filed with a category payload
its category does not name, and on a storage backend failure.
Missing boards and missing post ids are not errors; the store reports
them as ``None`` or an empty list.
"""

from typing import Any, Dict


class CatalogError(Exception):
    """Base exception for catalog failures."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class AuthorizationError(CatalogError):
    """The account id passed to a delete is not the caller's identity."""

    def __init__(self, account_id: str, caller_id: str):
        super().__init__(
            "can not delete item check that account id is equal to yours!",
            "NOT_AUTHORIZED",
            403,
        )
        self.account_id = account_id
        self.caller_id = caller_id


class StorageError(CatalogError):
    """Reading or writing persisted catalog state failed."""

    def __init__(self, message: str, key: str):
        super().__init__(f"Storage failure for {key!r}: {message}", "STORAGE_ERROR", 503)
        self.key = key


class CategoryMismatchError(CatalogError):
    """A listing filed with a category payload that its category does not name."""

    def __init__(self, category: str, kind: str):
        super().__init__(
            f"category {category!r} does not match {kind!r} details",
            "CATEGORY_MISMATCH",
            422,
        )
        self.category = category
        self.kind = kind
