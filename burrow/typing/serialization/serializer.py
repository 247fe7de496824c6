"""
Conversion between Document instances and the plain field maps stored in the database.

pack() never emits bookkeeping attributes (the owning collection reference, the removed flag,
the initialization marker). unpack() always builds a brand new instance, so a failed conversion
cannot leave any existing object half-updated.
"""
from typing import Any, TypeVar

from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


T = TypeVar('T', bound=BsonableDataclass)

def pack(instance: BsonableDataclass) -> dict[str, Any]:
	""" Returns the field map to store for this instance. """
	return instance.to_bson()

def unpack(field_map: Any, cls: type[T], document_context: 'DocumentContext | None' = None) -> T:
	""" Builds a new instance of cls from a stored field map. Raises ConversionError if the map does not fit the declared fields. """
	return cls.from_bson(field_map, document_context)
