import time
from typing import Any, Generic, Mapping, TypeVar

from pymongo import ReturnDocument
from pymongo.collection import Collection

from .document import Document
from .document_context import DocumentContext
from .document_id import coerce_document_id
from .update_operator import UpdateOperator
from .cursor_proxy import CursorProxy
from ..connection.connection_manager import ConnectionManager
from ..typing.fields.field_schema import FieldSchema
from ..typing.fields.get_field_name import get_field_name
from ..typing.registration.bson_types import SEQUENCES
from ..typing.serialization.obj_to_bson import obj_to_bson
from ..typing.serialization.serializer import pack, unpack
from ..utilities.conversion_error import ConversionError
from ..utilities.setup_error import SetupError
from ..utilities.sync_error import SyncError
from ..utilities.validation_error import ValidationError
from ..utilities.logger import get_logger


T = TypeVar('T', bound=Document)

class CollectionProxy(Generic[T]):
	""" Binds a Document class to a collection. This is the only place database operations are issued.

	Documents created or retrieved here keep a weak reference back to this proxy, and their update_*,
	sync, remove and reinsert methods call back into it.

	Two proxies bound to the same (Document class, collection name, ConnectionManager) are interchangeable.
	Subclass this and register it with ModelRegistry.register(..., proxy_cls=...) to customize a model's proxy.
	"""

	def __init__(self, model_cls: type[T], connection_manager: ConnectionManager, collection_name: str | None = None) -> None:
		if not (isinstance(model_cls, type) and issubclass(model_cls, Document)) or model_cls is Document:
			raise SetupError(f"CollectionProxy requires a Document subclass, got {model_cls!r}.")
		self._model_cls = model_cls
		self._connection_manager = connection_manager
		self._collection_name = collection_name or model_cls.get_collection_name()

	@property
	def model_cls(self) -> type[T]:
		return self._model_cls

	@property
	def collection_name(self) -> str:
		return self._collection_name

	@property
	def connection_manager(self) -> ConnectionManager:
		return self._connection_manager

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, CollectionProxy):
			return NotImplemented
		return (self._model_cls, self._collection_name, self._connection_manager) == (other._model_cls, other._collection_name, other._connection_manager)

	def __hash__(self) -> int:
		return hash((self._model_cls, self._collection_name, id(self._connection_manager)))

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self._model_cls.__name__}, collection={self._collection_name!r})"

	def _handle(self) -> Collection:
		""" Returns the pymongo Collection. Resolved on every call so that a fork is always detected. """
		return self._connection_manager.get_collection_handle(self._collection_name)

	def _check_instance(self, instance: Any) -> T:
		if not isinstance(instance, self._model_cls):
			raise TypeError(f"Expected an instance of {self._model_cls.__name__}, got {type(instance).__name__}.")
		return instance

	# region: Collection-wide operations
	def create(self, fields: Mapping[str, Any] | None = None, /, **kwargs: Any) -> T:
		""" Construct a new document from the field values, insert it, and return it bound to this collection. """
		start_time = time.time()

		document = self._model_cls(**{**(fields or {}), **kwargs})
		result = self._handle().insert_one(pack(document))
		document._assign_id(result.inserted_id)
		document._bind(self)

		get_logger().debug(f"Inserted document of type '{self._model_cls.__name__}' with _id {document._id!r} in {(time.time() - start_time):.3f} seconds")
		return document

	def find_id(self, document_id: Any) -> T | None:
		""" Returns the document with this _id, or None. 24-character hex strings are treated as ObjectIds. """
		return self.find_one({"_id": coerce_document_id(document_id)})

	def find_one(self, query: Mapping[str, Any] | None = None) -> T | None:
		""" Query the database and return the first matching document. Returns None if there are no matching documents. """
		start_time = time.time()

		raw = self._handle().find_one(query or {})

		get_logger().debug(f"Retrieved document of type '{self._model_cls.__name__}' for query: {query} in {(time.time() - start_time):.3f} seconds")

		if raw is None:
			return None
		return self.thaw(raw)

	def find(self, query: Mapping[str, Any] | None = None, **cursor_options: Any) -> CursorProxy[T]:
		""" Returns a cursor which inflates matching documents one at a time. cursor_options are passed to pymongo's find(). """
		cursor = self._handle().find(query or {}, **cursor_options)
		return CursorProxy(cursor, self)

	def count(self, query: Mapping[str, Any] | None = None) -> int:
		""" Return the total number of documents that match the query. """
		return self._handle().count_documents(query or {})

	def ensure_indexes(self) -> bool:
		""" Create every index the Document class declares in __indexes__. Creating an existing index is a no-op. """
		handle = self._handle()
		for index_spec in self._model_cls.__indexes__:
			handle.create_index(index_spec.keys, **index_spec.options)
		return True
	# endregion

	# region: Operations on individual documents
	def update(self, instance: T, directive: Mapping[str, Any]) -> bool:
		""" Apply the update directive atomically and sync the instance with the post-update state, in one round trip.
		If the record no longer exists, marks the instance removed and returns False. """
		self._check_instance(instance)
		start_time = time.time()

		raw = self._handle().find_one_and_update(
			{"_id": instance._id},
			directive,
			return_document=ReturnDocument.AFTER
		)

		get_logger().debug(f"Updated document of type '{self._model_cls.__name__}' with _id {instance._id!r} in {(time.time() - start_time):.3f} seconds")

		if raw is None:
			instance._set_removed(True)
			return False

		self._refresh(instance, raw)
		return True

	def remove(self, instance: T) -> bool:
		""" Delete the backing record. The object itself stays usable and can be reinserted. """
		self._check_instance(instance)
		self._handle().delete_one({"_id": instance._id})
		instance._set_removed(True)
		return True

	def reinsert(self, instance: T) -> bool:
		""" Write the object's current state back as a record with the same _id. Undoes remove(). """
		self._check_instance(instance)
		if instance._id is None:
			result = self._handle().insert_one(pack(instance))
			instance._assign_id(result.inserted_id)
		else:
			self._handle().replace_one({"_id": instance._id}, pack(instance), upsert=True)
		instance._bind(self)
		instance._set_removed(False)
		return True

	def sync(self, instance: T) -> bool:
		""" Overwrite the instance with the stored state. If the record no longer exists, marks the instance removed and returns False. """
		self._check_instance(instance)

		raw = self._handle().find_one({"_id": instance._id})
		if raw is None:
			instance._set_removed(True)
			return False

		self._refresh(instance, raw)
		instance._set_removed(False)
		return True

	def thaw(self, raw: Any) -> T:
		""" Inflate a raw record into a Document bound to this collection. """
		document_id = raw.get("_id") if isinstance(raw, dict) else None
		document_context = DocumentContext.for_(self._model_cls, document_id, self._collection_name)
		document = unpack(raw, self._model_cls, document_context)
		document._bind(self)
		return document

	def _refresh(self, instance: T, raw: Any) -> None:
		""" Converts into a throwaway instance first, so the target is only touched once conversion has fully succeeded. """
		try:
			source = self.thaw(raw)
		except ConversionError as e:
			raise SyncError(instance._id, e.message) from e
		instance._overwrite_from(source)
	# endregion

	# region: Update directive builders
	def _field_path(self, instance: T, field: Any) -> tuple[str, FieldSchema | None]:
		""" Returns the dot-notation path for a field, after checking its top-level field exists.
		Also returns the FieldSchema when the path names a declared field itself, so the value can be checked before it is sent. """
		field_path = get_field_name(field)
		root_field_name = field_path.split(".")[0]
		field_schema = type(instance).__bsonable_fields__.get(root_field_name)
		if field_schema is None and root_field_name not in instance.extra_fields():
			raise SetupError(f"'{root_field_name}' is not a field of {type(instance).__name__}.")
		return field_path, field_schema if field_path == root_field_name else None

	def _sequence_field(self, field_schema: FieldSchema | None, operator: UpdateOperator) -> FieldSchema | None:
		if field_schema is not None and field_schema.type_expectation.type_info.type_ not in SEQUENCES:
			raise ValidationError(f"{operator.value} needs an array field, but '{field_schema.field_name}' is declared as {field_schema.type_expectation}.")
		return field_schema

	def update_set(self, instance: T, field: Any, value: Any) -> bool:
		""" Set one field. """
		field_path, field_schema = self._field_path(instance, field)
		if field_schema is not None:
			field_schema.validate_field_value(value)
		return self.update(instance, {UpdateOperator.SET.value: {field_path: obj_to_bson(value)}})

	def update_unset(self, instance: T, field: Any) -> bool:
		""" Remove one field from the stored record. The field falls back to its default when synced. """
		field_path, field_schema = self._field_path(instance, field)
		if field_schema is not None and not field_schema.schema_config.has_default():
			raise ValidationError(f"'{field_path}' has no default, so it cannot be removed from the stored record.")
		return self.update(instance, {UpdateOperator.UNSET.value: {field_path: ""}})

	def update_inc(self, instance: T, field: Any, amount: int | float = 1) -> bool:
		""" Add to a numeric field. """
		if isinstance(amount, bool) or not isinstance(amount, (int, float)):
			raise TypeError(f"Increment amount must be a number, got {amount!r}.")
		field_path, field_schema = self._field_path(instance, field)
		if field_schema is not None:
			field_type = field_schema.type_expectation.type_info.type_
			if field_type not in (int, float):
				raise ValidationError(f"'{field_path}' is declared as {field_schema.type_expectation} and cannot be incremented.")
			if field_type is int and not isinstance(amount, int):
				raise ValidationError(f"'{field_path}' is declared as {field_schema.type_expectation}, so the increment must be an int. Got {amount!r}.")
		return self.update(instance, {UpdateOperator.INC.value: {field_path: amount}})

	def update_push(self, instance: T, field: Any, values: Any) -> bool:
		""" Append one value, or each of a list of values, to an array field. """
		field_path, field_schema = self._field_path(instance, field)
		return self.update(instance, {UpdateOperator.PUSH.value: {field_path: {"$each": self._array_elements(field_schema, UpdateOperator.PUSH, values)}}})

	def update_add(self, instance: T, field: Any, values: Any) -> bool:
		""" Append values to an array field, skipping any the array already contains. """
		field_path, field_schema = self._field_path(instance, field)
		return self.update(instance, {UpdateOperator.ADD_TO_SET.value: {field_path: {"$each": self._array_elements(field_schema, UpdateOperator.ADD_TO_SET, values)}}})

	def update_pop(self, instance: T, field: Any, *, first: bool = False) -> bool:
		""" Remove the last (or first) element of an array field. """
		field_path, field_schema = self._field_path(instance, field)
		self._sequence_field(field_schema, UpdateOperator.POP)
		return self.update(instance, {UpdateOperator.POP.value: {field_path: -1 if first else 1}})

	def update_pull(self, instance: T, field: Any, value: Any) -> bool:
		""" Remove every element equal to value from an array field. """
		field_path, field_schema = self._field_path(instance, field)
		self._sequence_field(field_schema, UpdateOperator.PULL)
		return self.update(instance, {UpdateOperator.PULL.value: {field_path: obj_to_bson(value)}})

	def _array_elements(self, field_schema: FieldSchema | None, operator: UpdateOperator, values: Any) -> list[Any]:
		""" A single value becomes a one-element list. Strings count as single values.
		Each element is checked against the declared element type before conversion. """
		if not isinstance(values, (list, tuple)):
			values = [values]

		if self._sequence_field(field_schema, operator) is not None:
			element_expectation = field_schema.type_expectation.element_expectation() # type: ignore
			for value in values:
				element_expectation.validate(value, None)

		return [obj_to_bson(value) for value in values]
	# endregion
