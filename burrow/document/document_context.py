from __future__ import annotations
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DocumentContext:
    """ Describes where a value being converted lives. Attached to conversion error messages. """
    document_path: str
    """ The path of the current field relative to the document root. 
    List elements will be returned as [idx]. """
    
    document_id: Any = None
    collection_name: str | None = None

    @classmethod
    def for_(cls, document_cls: type, document_id: Any = None, collection_name: str | None = None) -> DocumentContext:
        return cls(
            document_path=document_cls.__name__,
            document_id=document_id,
            collection_name=collection_name
        )

    def replace(self, document_path: str | None = None) -> DocumentContext:
        return DocumentContext(
            document_path=document_path if document_path else self.document_path,
            document_id=self.document_id,
            collection_name=self.collection_name
        )

    def subpath(self, field_name: str) -> DocumentContext:
        """ Returns a new DocumentContext with a modified document_path. """
        return self.replace(document_path=f"{self.document_path}.{field_name}")

    def subidx(self, idx: int) -> DocumentContext:
        """ Returns a new DocumentContext with a modified document_path. """
        return self.replace(document_path=f"{self.document_path}[{idx}]")

    def __str__(self) -> str:
        """ Printable to logs. """
        return f"Collection: {self.collection_name}\nDocument _id: {self.document_id!r}\nDocument path: {self.document_path}"
