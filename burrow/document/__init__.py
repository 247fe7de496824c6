"""
Document module for managing document operations and database interactions.

This module provides functionality for:
- Declaring Document classes and the indexes they need
- Creating, finding, updating, syncing and removing documents through a CollectionProxy
- Lazily inflating query results through a CursorProxy
- Registering Document classes by name
"""

from .document import Document
from .document_context import DocumentContext
from .index_spec import IndexSpec
from .update_operator import UpdateOperator
from .cursor_proxy import CursorProxy
from .collection_proxy import CollectionProxy
from .document_info import DocumentInfo
from .model_registry import ModelRegistry, model_registry
