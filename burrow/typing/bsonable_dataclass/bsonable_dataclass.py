from abc import ABC
from typing import Any, ClassVar, Self

from .bsonable_dataclass_meta import BsonableDataclassMeta
from ..fields.field_schema import FieldSchema
from ...utilities.conversion_error import ConversionError
from ...utilities.validation_error import ValidationError
from ...utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


class BsonableDataclass(ABC, metaclass=BsonableDataclassMeta):
	""" A class whose annotated fields can be stored as a BSON document. """
	__bsonable_fields__: ClassVar[dict[str, FieldSchema]] # Special field that stores a dictionary mapping field names -> field schemas
	__reserved_fields__: ClassVar[tuple[str, ...]] = ()
	""" Names which are neither declared nor extra fields. Subclasses serialize these themselves. """

	def __str__(self) -> str:
		output = f"{type(self).__name__}(\n"
		for field_name, field_value in self.__dict__.items():
			if field_name.startswith("__"):
				continue
			output += f"\t{field_name}={repr(field_value)},\n"
		output += ")"
		return output

	def __eq__(self, other: object) -> bool:
		if type(other) is not type(self):
			return NotImplemented
		return self.to_bson() == other.to_bson() # type: ignore

	def __post_init__(self) -> None:
		""" By default, post init does nothing. """
		return

	def extra_fields(self) -> dict[str, Any]:
		""" Returns the values stored on this object beyond what is annotated. """
		return {
			key: value for key, value in self.__dict__.items()
			if key not in type(self).__bsonable_fields__
			and key not in type(self).__reserved_fields__
			and not key.startswith("__")
		}

	def to_bson(self) -> dict[str, Any]:
		from ..serialization.obj_to_bson import obj_to_bson

		output = {}
		for field_name in type(self).__bsonable_fields__:
			output[field_name] = obj_to_bson(getattr(self, field_name))

		# Allow extra fields
		# Also serialize any additional fields that may be stored within the object beyond what is annotated
		# This helps with forward-compatibility when implementing new features
		for key, value in self.extra_fields().items():
			output[key] = obj_to_bson(value)

		return output

	@classmethod
	def from_bson(cls, bson: Any, document_context: 'DocumentContext | None') -> Self:
		""" Build a new instance from a bson document. The bson itself is never modified.
		If an annotated field is missing from the document, it will be set to its default, if one is declared. """
		from ..serialization.bson_to_type_expectation import bson_to_type_expectation

		if not isinstance(bson, dict):
			raise ConversionError(f"Expected a document for type {cls.__name__}, got {type(bson).__name__}.\n{document_context or ''}")

		obj_dict = {}

		for expected_field_name, expected_field_schema in cls.__bsonable_fields__.items():
			# 1. If the field name exists in the document, use that.
			# 2. Otherwise use a default value, if set.
			# 3. If all else fails, raise an Exception.
			if expected_field_name in bson:
				new_document_context = document_context.subpath(expected_field_name) if document_context else None
				obj_dict[expected_field_name] = bson_to_type_expectation(bson[expected_field_name], expected_field_schema.type_expectation, new_document_context)

			elif expected_field_schema.schema_config.has_default():
				field_default_value = expected_field_schema.schema_config.get_default()
				get_logger().debug(f"Using default value of {field_default_value!r} for {expected_field_name}.\n{document_context or ''}")
				obj_dict[expected_field_name] = field_default_value

			else:
				raise ConversionError(f"Error converting document to object of type {cls.__name__}. Document missing a value for field {expected_field_name}.\n{document_context or ''}")

		# Allow extra fields
		for key, value in bson.items():
			if key in cls.__bsonable_fields__:
				continue
			obj_dict[key] = value

		try:
			return cls(**obj_dict)
		except ValidationError as e:
			raise ConversionError(f"Error converting document to object of type {cls.__name__}: {e.message}\n{document_context or ''}") from e