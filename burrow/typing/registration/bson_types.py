from datetime import datetime

from bson import ObjectId


PRIMITIVES: tuple[type, ...] = (dict, datetime, str, float, int, bool, ObjectId)
""" Types stored as-is by the driver. A field annotated with one of these must match it exactly (no subclasses), with the exception of float which also accepts int. """

SEQUENCES: tuple[type, ...] = (list, tuple)
""" Sequence types. These are stored as BSON arrays and rebuilt into the annotated sequence type.
Sets are not among them: a stored array keeps its order and may repeat elements, which a set cannot reproduce. """
