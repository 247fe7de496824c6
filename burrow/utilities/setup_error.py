from .burrow_error import BurrowError


class SetupError(BurrowError):
    """Exception raised for model declaration and registration errors."""
