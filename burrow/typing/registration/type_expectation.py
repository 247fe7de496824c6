from dataclasses import dataclass
from typing import Any

from .type_info import TypeInfo
from .bson_types import SEQUENCES
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


@dataclass
class TypeExpectation:
	type_info: TypeInfo
	is_nullable: bool

	def __str__(self) -> str:
		output = self.type_info.type_.__name__
		if self.type_info.sub_type is not None:
			sub_type = self.type_info.sub_type
			output += f"[{sub_type.__name__ if isinstance(sub_type, type) else sub_type}]"
		if self.is_nullable:
			output += " | None"
		return output

	def element_expectation(self) -> 'TypeExpectation':
		""" Returns the TypeExpectation for the elements of a sequence field. """
		from .get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation
		if self.type_info.sub_type is None:
			raise ValueError(f"Type expectation '{self}' does not describe a sequence.")
		return get_type_expectation_from_type_annotation(self.type_info.sub_type)

	def validate(self, value: Any, document_context: 'DocumentContext | None') -> None:
		""" Raises an error if the provided value does not match this TypeExpectation. """
		from ...utilities.validation_error import ValidationError
		if not self._is_valid_value(value):
			raise ValidationError(f"Value {value!r} is not valid according to the type expectation '{self}'.\n{document_context or ''}")

	def _is_valid_value(self, value: Any) -> bool:
		""" Validate that a value is consistent with this TypeExpectation. """
		if value is None:
			return self.is_nullable

		type_ = self.type_info.type_

		# bool is a subclass of int, but a bool is never a valid number here
		if isinstance(value, bool) and type_ is not bool:
			return False
		
		if type_ is float:
			return isinstance(value, (int, float))

		if not isinstance(value, type_):
			return False

		if type_ in SEQUENCES:
			element_expectation = self.element_expectation()
			return all(element_expectation._is_valid_value(element) for element in value)

		return True
