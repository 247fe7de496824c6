class BurrowError(Exception):
    """ Base class for every error raised by burrow itself.
    Errors raised by the pymongo driver are not wrapped and do not derive from this class. """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)
