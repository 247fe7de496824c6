from dataclasses import dataclass
from typing import Any


@dataclass
class TypeInfo:
	""" Stores type information. If the type is a sequence, the element annotation will be stored within the sub_type field.
	For example list[str] will produce: type_ = list, sub_type = str
	"""
	type_: type
	sub_type: Any | None
