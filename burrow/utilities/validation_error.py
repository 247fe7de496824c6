from .burrow_error import BurrowError


class ValidationError(BurrowError, ValueError):
    """Exception raised when a field value does not satisfy its declared type or validation function.
    NOTE: Messages in these errors should be shareable to the user. """
