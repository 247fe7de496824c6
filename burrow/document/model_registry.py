from typing import Callable, Iterator, TypeVar, overload

from bidict import bidict

from .document import Document
from .document_info import DocumentInfo
from .collection_proxy import CollectionProxy
from ..utilities.setup_error import SetupError
from ..utilities.logger import get_logger


D = TypeVar('D', bound=type[Document])

class ModelRegistry:
	""" Maps short model names to Document classes, and optionally to a custom CollectionProxy class.

	Populate it at startup:

		model_registry.register(Person)

		@model_registry.register(name="Post", proxy_cls=PostCollection)
		class BlogPost(Document):
			...
	"""

	def __init__(self) -> None:
		self._models: bidict[str, type[Document]] = bidict()
		self._proxy_classes: dict[str, type[CollectionProxy]] = {}

	@overload
	def register(self, cls: D, *, name: str | None = None, proxy_cls: type[CollectionProxy] | None = None) -> D: ...

	@overload
	def register(self, cls: None = None, *, name: str | None = None, proxy_cls: type[CollectionProxy] | None = None) -> Callable[[D], D]: ...

	def register(self, cls=None, *, name=None, proxy_cls=None):
		""" Register a Document class under name (defaults to the class name). Usable as a decorator, with or without arguments. """
		if cls is None:
			return lambda cls: self.register(cls, name=name, proxy_cls=proxy_cls)

		if not isinstance(cls, type) or not issubclass(cls, Document) or cls is Document:
			raise SetupError(f"Only Document subclasses can be registered, got {cls!r}.")
		if proxy_cls is not None and not (isinstance(proxy_cls, type) and issubclass(proxy_cls, CollectionProxy)):
			raise SetupError(f"proxy_cls must be a CollectionProxy subclass, got {proxy_cls!r}.")

		name = name or cls.__name__

		# Enforce unique names and classes
		if name in self._models:
			raise SetupError(f"A Document class is already registered under the name '{name}'.")
		if cls in self._models.inverse:
			raise SetupError(f"Document class {cls.__name__} is already registered as '{self._models.inverse[cls]}'.")

		self._models[name] = cls
		if proxy_cls is not None:
			self._proxy_classes[name] = proxy_cls

		get_logger().debug(f"Registered Document class {cls.__name__} as '{name}'.")
		return cls

	def get_document_info(self, name: str) -> DocumentInfo:
		if name not in self._models:
			raise SetupError(f"No Document class registered under the name '{name}'.")
		return DocumentInfo(
			cls=self._models[name],
			name=name,
			proxy_cls=self._proxy_classes.get(name, CollectionProxy)
		)

	def name_to_cls(self, name: str) -> type[Document]:
		return self.get_document_info(name).cls

	def cls_to_name(self, cls: type[Document]) -> str:
		if cls not in self._models.inverse:
			raise SetupError(f"Document class {cls.__name__} is not registered.")
		return self._models.inverse[cls]

	def __contains__(self, name: object) -> bool:
		return name in self._models

	def __iter__(self) -> Iterator[str]:
		return iter(self._models)

	def __len__(self) -> int:
		return len(self._models)


model_registry = ModelRegistry()
""" Default registry used by Burrow when none is given. """
