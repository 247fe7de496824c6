"""
burrow: stored documents as typed, in-memory objects.

Objects are projections of the state kept in the database. They are not modified through
attribute assignment; instead they issue atomic update directives and sync themselves with
the result. Connection handles are rebuilt transparently after a fork.
"""

from .burrow import Burrow
from .connection import ConnectionConfig, ConnectionManager, HandleState
from .document import (
    CollectionProxy,
    CursorProxy,
    Document,
    DocumentContext,
    DocumentInfo,
    IndexSpec,
    ModelRegistry,
    UpdateOperator,
    model_registry,
)
from .typing import SchemaConfig, FieldSchema, get_field_name, pack, unpack
from .utilities.burrow_error import BurrowError
from .utilities.conversion_error import ConversionError
from .utilities.detached_document_error import DetachedDocumentError
from .utilities.setup_error import SetupError
from .utilities.store_connection_error import StoreConnectionError
from .utilities.store_error import StoreError
from .utilities.sync_error import SyncError
from .utilities.validation_error import ValidationError
from .utilities.logger import get_logger, set_logger, set_log_level
