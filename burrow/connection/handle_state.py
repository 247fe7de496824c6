from enum import StrEnum, auto


class HandleState(StrEnum):
    """ Describes whether the client, database and collection handles may be used by this process. """
    UNINITIALIZED = auto()
    VALID = auto()
    INVALIDATED = auto()
