from .burrow_error import BurrowError


class StoreConnectionError(BurrowError, ConnectionError):
    """ Raised when the database client cannot be constructed. """
