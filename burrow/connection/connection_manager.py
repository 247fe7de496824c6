import os
from dataclasses import dataclass, field

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .connection_config import ConnectionConfig
from .handle_state import HandleState
from ..utilities.store_connection_error import StoreConnectionError
from ..utilities.logger import get_logger


@dataclass
class _Handles:
    """ The client, its database and the collection handles built from it. Always replaced as a whole. """
    client: MongoClient
    database: Database
    collections: dict[str, Collection] = field(default_factory=dict)


class ConnectionManager:
    """ Owns the database client, the database handle and a cache of collection handles.

    The three are kept in one cell which is either UNINITIALIZED, VALID or INVALIDATED, and are always
    built and discarded together. Every access goes through _ensure_valid(), which compares the pid that
    built the cell with the current pid. A forked child therefore never touches the parent's sockets: its
    first access discards the inherited handles and builds new ones.

    Besides a pid change, close() is the only other way the cell becomes INVALIDATED. It is an explicit
    shutdown by the owner, and the next access reconnects exactly as after a fork.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._state = HandleState.UNINITIALIZED
        self._pid = os.getpid()
        self._handles: _Handles | None = None

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def client(self) -> MongoClient:
        return self._ensure_valid().client

    @property
    def database(self) -> Database:
        return self._ensure_valid().database

    def get_collection_handle(self, name: str) -> Collection:
        """ Returns the cached handle for the named collection, building the client first if needed. """
        handles = self._ensure_valid()
        handle = handles.collections.get(name)
        if handle is None:
            handle = handles.database.get_collection(name)
            handles.collections[name] = handle
        return handle

    def close(self) -> None:
        """ Closes the client. The next access reconnects. """
        if self._handles is not None and self._pid == os.getpid():
            self._handles.client.close()
        self._invalidate()

    def _ensure_valid(self) -> _Handles:
        self._check_pid()
        if self._handles is None:
            self._handles = self._connect()
            self._state = HandleState.VALID
        return self._handles

    def _check_pid(self) -> None:
        """ Invalidate the handles if we're running in a different process than the one that built them. """
        pid = os.getpid()
        if pid != self._pid:
            get_logger().info(f"Detected fork (pid {self._pid} -> {pid}). Discarding inherited database handles.")
            self._pid = pid
            # The parent still owns these sockets, so drop our references without closing them
            self._invalidate()

    def _invalidate(self) -> None:
        self._handles = None
        if self._state is HandleState.VALID:
            self._state = HandleState.INVALIDATED

    def _connect(self) -> _Handles:
        try:
            client = self.config.client_factory(self.config.host, **self.config.client_options)
        except (PyMongoError, TypeError, ValueError) as e:
            raise StoreConnectionError(f"Unable to create a database client for host {self.config.host!r}: {e}") from e

        get_logger().debug(f"Connected to database '{self.config.database_name}' (pid {self._pid}).")
        return _Handles(client=client, database=client.get_database(self.config.database_name))
