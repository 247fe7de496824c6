from datetime import datetime
from enum import Enum
from typing import Any

from bson import ObjectId

from ..registration.bson_types import SEQUENCES
from .validate_primitive_dict import validate_primitive_dict


def obj_to_bson(obj: Any) -> Any:
	"""
	Serializes a field value into Bson.
	"""

	# Handle types from specific (complex) to general (simple)
	if obj is None:
		return None

	# Enums are stored by value. Check before primitives, since StrEnum and IntEnum members are also str and int.
	elif isinstance(obj, Enum):
		return obj.value

	elif type(obj) in SEQUENCES:
		return [obj_to_bson(item) for item in obj]

	elif type(obj) is dict:
		validate_primitive_dict(obj)
		return obj

	# The driver handles datetimes and ObjectIds natively, so pass them through as is
	elif isinstance(obj, (datetime, str, bool, int, float, ObjectId)):
		return obj

	else:
		raise TypeError(f"Type {type(obj)} not serializable.")
