import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pymongo import MongoClient


@dataclass(frozen=True)
class ConnectionConfig:
    """ Everything needed to build a database client. Finalized at construction and never modified afterwards. """
    database_name: str
    host: str | None = None
    """ A hostname or mongodb:// URI. None lets the client use its own default. """
    client_options: Mapping[str, Any] = field(default_factory=dict)
    """ Keyword options passed to the client factory. Stored as a read-only mapping. """
    client_factory: Callable[..., MongoClient] = MongoClient
    """ Called as client_factory(host, **client_options). """

    def __post_init__(self) -> None:
        if not self.database_name:
            raise ValueError("ConnectionConfig requires a database_name.")

        client_options = dict(self.client_options)
        # Authenticate against the configured database unless told otherwise
        if "username" in client_options and "authSource" not in client_options:
            client_options["authSource"] = self.database_name
        object.__setattr__(self, "client_options", MappingProxyType(client_options))

    @classmethod
    def from_env(cls, **client_options: Any) -> 'ConnectionConfig':
        """ Builds a config from the MONGO_URL and MONGO_DB_NAME environment variables. """
        MONGO_URL = os.environ.get("MONGO_URL")
        if not MONGO_URL: raise ValueError("Please set MONGO_URL in your environment variables.")

        MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME")
        if not MONGO_DB_NAME: raise ValueError("Please set MONGO_DB_NAME in your environment variables.")

        return cls(database_name=MONGO_DB_NAME, host=MONGO_URL, client_options=client_options)
