from enum import Enum

from ..registration.bson_types import PRIMITIVES, SEQUENCES
from ..registration.type_expectation import TypeExpectation
from ...utilities.setup_error import SetupError


def validate_bsonable_dataclass_field_schema(cls_name: str, field_name: str, type_expectation: TypeExpectation) -> None:
    """ Validates that a field is annotated to store a serializable type. """
    field_type = type_expectation.type_info.type_

    if field_type in SEQUENCES:
        element_expectation = type_expectation.element_expectation()
        if element_expectation.type_info.type_ in SEQUENCES:
            raise SetupError(f"Field '{field_name}' in class '{cls_name}' nests sequences, which is not supported.")
        validate_bsonable_dataclass_field_schema(cls_name, field_name, element_expectation)
        return

    if field_type in PRIMITIVES:
        return

    if isinstance(field_type, type) and issubclass(field_type, Enum):
        return

    raise SetupError(f"Class '{cls_name}' contains a field '{field_name}' which stores a non-serializable type {getattr(field_type, '__name__', field_type)}.")
