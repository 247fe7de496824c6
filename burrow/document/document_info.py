from dataclasses import dataclass

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document
	from .collection_proxy import CollectionProxy


@dataclass(frozen=True)
class DocumentInfo:
	""" What the registry knows about one Document class. """
	cls: 'type[Document]'
	name: str
	proxy_cls: 'type[CollectionProxy]'
