from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database


@dataclass
class MongoConfig:
    uri: str
    database: str
    server_selection_timeout_ms: int = 5000


class DatabaseConnection:
    """Singleton-like MongoDB handle factory.

    Note: MongoClient keeps its own connection pool, so one client per process
    is shared by every repository.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: MongoConfig):
        self._config = config
        self._client: Optional[MongoClient] = None

    @classmethod
    def get_instance(cls, config: MongoConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(
                self._config.uri,
                tz_aware=True,
                serverSelectionTimeoutMS=int(self._config.server_selection_timeout_ms),
            )
        return self._client

    def database(self) -> Database:
        return self.client()[self._config.database]

    def collection(self, name: str) -> Collection:
        return self.database()[name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
