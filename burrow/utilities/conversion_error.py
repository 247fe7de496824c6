from .burrow_error import BurrowError


class ConversionError(BurrowError, ValueError):
    """ Raised when a stored record (or one of its values) cannot be turned into a typed object. """
