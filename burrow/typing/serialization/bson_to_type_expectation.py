from enum import Enum
from typing import Any

from .bson_to_primitive import bson_to_primitive
from ..registration.bson_types import PRIMITIVES, SEQUENCES
from ..registration.type_expectation import TypeExpectation
from ...utilities.conversion_error import ConversionError

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


def bson_to_type_expectation(bson: Any, type_expectation: TypeExpectation, document_context: 'DocumentContext | None') -> Any:
	""" Deserializes a Bson value into the specified type expectation. """
	
	# Handle valid null cases
	if bson is None:
		if type_expectation.is_nullable:
			return None
		else:
			raise ConversionError(f"Received None for type expectation {type_expectation} which is not nullable.\n{document_context or ''}")

	expected_type = type_expectation.type_info.type_

	# Handle types from specific (complex) to general (simple)
	if expected_type in SEQUENCES:
		if not isinstance(bson, list):
			raise ConversionError(f"Expected an array for field of type {type_expectation}. Instead received {type(bson).__name__}.\n{document_context or ''}")
		
		element_expectation = type_expectation.element_expectation()
		obj_list = []
		for idx, element in enumerate(bson):
			new_document_context = document_context.subidx(idx) if document_context else None
			obj_list.append(bson_to_type_expectation(element, element_expectation, new_document_context))
		
		return expected_type(obj_list)

	elif issubclass(expected_type, Enum):
		try:
			return expected_type(bson)
		except ValueError as e:
			raise ConversionError(f"Error deserializing Enum {expected_type.__name__}: {e}.\n{document_context or ''}") from e

	elif expected_type in PRIMITIVES:
		return bson_to_primitive(bson, type_expectation.type_info, document_context)

	else:
		raise ConversionError(f"Unable to deserialize unregistered expected type {expected_type}.\n{document_context or ''}")
