"""
Typing Module

This module declares the field schema of Document classes and converts field values
to and from the BSON stored by the database.
"""

from .fields.schema_config import SchemaConfig
from .fields.field_schema import FieldSchema
from .fields.get_field_name import get_field_name
from .bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from .serialization.serializer import pack, unpack
