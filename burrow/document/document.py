import weakref
from typing import Any, ClassVar, Self

from ..typing.bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from .document_id import validate_document_id
from .index_spec import IndexSpec
from .to_collection_name import to_collection_name
from ..utilities.detached_document_error import DetachedDocumentError

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .collection_proxy import CollectionProxy


class Document(BsonableDataclass, frozen=True):
	""" An in-memory projection of one stored record.

	Documents are frozen: their fields change only when the owning CollectionProxy syncs them with the
	database, after an atomic update or an explicit sync(). Use the update_* methods instead of assigning.

	Newly created objects get the _id generated by the store unless you specify one specifically.
	"""
	# Class fields
	__collection_name__: ClassVar[str | None] = None
	""" Overrides the collection name derived from the class name. """
	__indexes__: ClassVar[tuple[IndexSpec, ...]] = ()
	""" Indexes created by CollectionProxy.ensure_indexes(). """
	__reserved_fields__ = ("_id", )

	# Instance fields
	_id: Any

	@classmethod
	def get_collection_name(cls) -> str:
		return cls.__collection_name__ or to_collection_name(cls.__name__)

	def __post_init__(self) -> None:
		_id = self.__dict__.get("_id")
		validate_document_id(_id)
		object.__setattr__(self, "_id", _id)
		object.__setattr__(self, "__removed__", False)
		object.__setattr__(self, "__collection_ref__", None)

	def __repr__(self) -> str:
		return f"<{type(self).__name__} _id={self._id!r}{' removed' if self.removed else ''}>"

	def to_bson(self) -> dict[str, Any]:
		output: dict[str, Any] = {} if self._id is None else {"_id": self._id}
		output.update(super().to_bson())
		return output

	@property
	def removed(self) -> bool:
		""" True when this object is known to have no backing record. """
		return self.__removed__ # type: ignore

	@property
	def collection(self) -> 'CollectionProxy[Self]':
		""" The CollectionProxy this object was created or retrieved by. """
		ref = self.__collection_ref__ # type: ignore
		proxy = ref() if ref is not None else None
		if proxy is None:
			raise DetachedDocumentError(f"{type(self).__name__} with _id {self._id!r} is not bound to a collection. Create or retrieve documents through a CollectionProxy.")
		return proxy

	# region: Bookkeeping. Only CollectionProxy calls these.
	def _bind(self, collection: 'CollectionProxy') -> None:
		object.__setattr__(self, "__collection_ref__", weakref.ref(collection))

	def _set_removed(self, removed: bool) -> None:
		object.__setattr__(self, "__removed__", removed)

	def _assign_id(self, document_id: Any) -> None:
		if self._id is not None and self._id != document_id:
			raise ValueError(f"Cannot change the _id of {type(self).__name__} from {self._id!r} to {document_id!r}.")
		object.__setattr__(self, "_id", document_id)

	def _overwrite_from(self, source: Self) -> None:
		""" Copies every declared field, then the extra fields, from a freshly converted instance. """
		for field_name in type(self).__bsonable_fields__:
			object.__setattr__(self, field_name, getattr(source, field_name))

		for key in self.extra_fields():
			del self.__dict__[key]
		for key, value in source.extra_fields().items():
			object.__setattr__(self, key, value)
	# endregion

	# Self-service methods. These delegate to the bound CollectionProxy.
	def update(self, directive: dict[str, Any]) -> bool:
		""" Apply a raw update directive atomically and sync with the result. Returns False if the record is gone. """
		return self.collection.update(self, directive)

	def update_set(self, field: Any, value: Any) -> bool:
		return self.collection.update_set(self, field, value)

	def update_inc(self, field: Any, amount: int | float = 1) -> bool:
		return self.collection.update_inc(self, field, amount)

	def update_push(self, field: Any, values: Any) -> bool:
		return self.collection.update_push(self, field, values)

	def update_add(self, field: Any, values: Any) -> bool:
		""" Append values not already present in the array. """
		return self.collection.update_add(self, field, values)

	def update_pop(self, field: Any, *, first: bool = False) -> bool:
		return self.collection.update_pop(self, field, first=first)

	def update_pull(self, field: Any, value: Any) -> bool:
		return self.collection.update_pull(self, field, value)

	def update_unset(self, field: Any) -> bool:
		return self.collection.update_unset(self, field)

	def sync(self) -> bool:
		return self.collection.sync(self)

	def remove(self) -> bool:
		return self.collection.remove(self)

	def reinsert(self) -> bool:
		return self.collection.reinsert(self)
