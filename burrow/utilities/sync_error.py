from typing import Any

from .burrow_error import BurrowError


class SyncError(BurrowError):
    """ Raised when a refreshed record could not be converted while syncing or updating an instance.
    The instance being refreshed is left exactly as it was. The ConversionError is chained as __cause__. """

    def __init__(self, document_id: Any, reason: str) -> None:
        self.document_id = document_id
        super().__init__(f"Could not inflate updated document with _id={document_id!r} because: {reason}")
