from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .schema_config import _SchemaConfig
if TYPE_CHECKING:
    from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
    from ..registration.type_expectation import TypeExpectation


class FieldSchema:
    """ Stores the schema for a declared field. After class creation, Person.name evaluates to the FieldSchema for 'name'. """
    def __init__(self,
                 field_name: str,
                 containing_cls: type[BsonableDataclass],
                 type_expectation: TypeExpectation,
                 schema_config: _SchemaConfig
                ) -> None:
        self.field_name = field_name
        self.containing_cls = containing_cls
        self.type_expectation = type_expectation
        self.schema_config = schema_config

    def __repr__(self) -> str:
        return f"FieldSchema({self.containing_cls.__name__}.{self.field_name}: {self.type_expectation})"

    def validate_field_value(self, field_value: Any) -> None:
        """ Validates the field value first against the type expectation, then against the validation func, if any.
        These should raise a ValidationError with a client-shareable error mesage. """
        self.type_expectation.validate(field_value, None)

        if self.schema_config.validation_func is not None:
            self.schema_config.validation_func(field_value)
