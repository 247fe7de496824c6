from typing import Any

from .field_schema import FieldSchema


def get_field_name(bsonable_field: Any) -> str:
    """ Get the name of a field given either its name or its class-level FieldSchema (e.g. Person.likes). """
    if isinstance(bsonable_field, FieldSchema):
        return bsonable_field.field_name
    if isinstance(bsonable_field, str):
        return bsonable_field
    raise TypeError(f"Expected a field name or FieldSchema, got {type(bsonable_field).__name__}.")
