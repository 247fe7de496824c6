from .burrow_error import BurrowError


class DetachedDocumentError(BurrowError):
    """ Raised when a document method needs its collection but the document is not bound to a live one. """
