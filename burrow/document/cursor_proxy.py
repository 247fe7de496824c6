from typing import Any, Generic, Self, TypeVar

from pymongo.cursor import Cursor

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .collection_proxy import CollectionProxy
	from .document import Document


T = TypeVar('T', bound='Document')

class CursorProxy(Generic[T]):
	""" Wraps a pymongo Cursor and inflates each record into a Document as it is pulled.

	Forward-only and not restartable: call find() again to re-run the query. Once exhausted,
	every further next() raises StopIteration again.
	"""

	def __init__(self, cursor: Cursor, collection: 'CollectionProxy[T]') -> None:
		self._cursor = cursor
		self._collection = collection
		self._exhausted = False

	@property
	def exhausted(self) -> bool:
		return self._exhausted

	def __iter__(self) -> Self:
		return self

	def __next__(self) -> T:
		if self._exhausted:
			raise StopIteration
		try:
			raw = next(self._cursor)
		except StopIteration:
			self._exhausted = True
			raise
		return self._collection.thaw(raw)

	def __enter__(self) -> Self:
		return self

	def __exit__(self, *exc_info: Any) -> None:
		self.close()

	# These modify the underlying query, so they must be called before iterating.
	def sort(self, key_or_list: Any, direction: Any = None) -> Self:
		self._cursor.sort(key_or_list, direction)
		return self

	def skip(self, skip: int) -> Self:
		self._cursor.skip(skip)
		return self

	def limit(self, limit: int) -> Self:
		self._cursor.limit(limit)
		return self

	def all(self) -> list[T]:
		""" Inflate every remaining record. """
		return list(self)

	def close(self) -> None:
		self._cursor.close()
		self._exhausted = True
