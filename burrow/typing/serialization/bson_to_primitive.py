from datetime import datetime
from typing import Any

from bson import ObjectId

from ..registration.type_info import TypeInfo
from ...utilities.conversion_error import ConversionError

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


def bson_to_primitive(bson: Any, expected_type_info: TypeInfo, document_context: 'DocumentContext | None') -> Any:
	""" Converts a BSON value to a primitive type based on the expected type information. """

	if expected_type_info.type_ is dict:
		if not isinstance(bson, dict):
			raise ConversionError(f"{bson!r} not of the expected type dict.\n\n# Document Context:\n{document_context}")
		return bson

	elif expected_type_info.type_ is datetime:
		if not isinstance(bson, datetime):
			raise ConversionError(f"{bson!r} not of the expected type datetime.\n\n# Document Context:\n{document_context}")
		return bson
	
	elif expected_type_info.type_ is str:
		if not isinstance(bson, str): 
			raise ConversionError(f"{bson!r} not of the expected type str.\n\n# Document Context:\n{document_context}")
		return str(bson)
	
	elif expected_type_info.type_ is float:
		# Whole numbers may come back from the store as ints
		if isinstance(bson, bool) or not isinstance(bson, (int, float)):
			raise ConversionError(f"{bson!r} not convertible to expected type float.\n\n# Document Context:\n{document_context}")
		return float(bson)
	
	elif expected_type_info.type_ is bool:
		if not isinstance(bson, bool): 
			raise ConversionError(f"{bson!r} not of the expected type bool.\n\n# Document Context:\n{document_context}")
		return bson
	
	elif expected_type_info.type_ is int:
		if isinstance(bson, bool) or not isinstance(bson, int): 
			raise ConversionError(f"{bson!r} not of the expected type int.\n\n# Document Context:\n{document_context}")
		return int(bson)

	elif expected_type_info.type_ is ObjectId:
		if not isinstance(bson, ObjectId):
			raise ConversionError(f"{bson!r} not of the expected type ObjectId.\n\n# Document Context:\n{document_context}")
		return bson
	
	else:
		raise ConversionError(f"Unable to deserialize invalid primitive type {expected_type_info.type_}.\n\n# Document Context:\n{document_context}")
