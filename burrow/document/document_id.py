from typing import Any

from bson import ObjectId


def coerce_document_id(document_id: Any) -> Any:
	""" Strings that look like an ObjectId (24 hex characters) are converted into one, since that's what the store generates.
	Any other id is used as given. """
	if isinstance(document_id, str) and ObjectId.is_valid(document_id):
		return ObjectId(document_id)
	return document_id

def validate_document_id(document_id: Any) -> None:
	""" The store accepts any non-array value as an _id. None means the store should generate one. """
	if isinstance(document_id, (list, tuple, set, frozenset)):
		raise TypeError(f"A document _id cannot be an array. Got {document_id!r}.")
