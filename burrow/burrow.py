from .connection.connection_config import ConnectionConfig
from .connection.connection_manager import ConnectionManager
from .document.collection_proxy import CollectionProxy
from .document.model_registry import ModelRegistry, model_registry


class Burrow:
	""" Entry point. Associates a registry of Document classes with one database connection.

		burrow = Burrow(ConnectionConfig(database_name="test", host="mongodb://localhost:27017"))
		people = burrow.collection("Person")
		john = people.create(name="John")
	"""

	def __init__(self, config: ConnectionConfig, registry: ModelRegistry | None = None) -> None:
		self.config = config
		self.registry = registry if registry is not None else model_registry
		self.connection_manager = ConnectionManager(config)
		self._collections: dict[tuple[str, str], CollectionProxy] = {}

	def collection(self, name: str, collection_name: str | None = None) -> CollectionProxy:
		""" Returns the CollectionProxy for the Document class registered under name.
		Proxies are cached here, which keeps them alive for the documents that reference them. """
		document_info = self.registry.get_document_info(name)
		collection_name = collection_name or document_info.cls.get_collection_name()

		key = (name, collection_name)
		proxy = self._collections.get(key)
		if proxy is None:
			proxy = document_info.proxy_cls(document_info.cls, self.connection_manager, collection_name)
			self._collections[key] = proxy
		return proxy

	def close(self) -> None:
		self.connection_manager.close()
