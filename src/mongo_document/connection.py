# src/mongo_document/connection.py
import threading
from typing import Any, Optional

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .errors import ConnectionError
from .registry import ModelRegistry
from .settings import MongoSettings
from .utils import setup_logger


class MongoConnection:
    """Async MongoDB client that binds registered documents to their collections"""

    def __init__(self, settings: Optional[MongoSettings] = None, client: Optional[Any] = None):
        self.settings = settings or MongoSettings.from_env()
        self.logger = setup_logger(self.__class__.__name__)
        self._client = client
        self._client_lock = threading.Lock()

    def _initialize_client(self) -> Any:
        with self._client_lock:
            if self._client is None:
                self._client = AsyncMongoClient(
                    self.settings.uri,
                    maxPoolSize=self.settings.max_pool_size,
                    minPoolSize=self.settings.min_pool_size,
                    serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms,
                )
                self.logger.info("MongoDB client initialized")
        return self._client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._initialize_client()
        return self._client

    @property
    def database(self) -> Any:
        return self.client[self.settings.database]

    async def ping(self) -> None:
        """Check the server is reachable"""
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            raise ConnectionError(f"MongoDB ping failed: {str(e)}") from e

    def get_collection(self, model: type) -> Any:
        meta = ModelRegistry.get(model)
        return self.database[meta.collection]

    def bind(self, *models: type) -> None:
        """Bind the given models (all registered models by default) to their collections"""
        for model in models or tuple(ModelRegistry.models()):
            model.bind(self.get_collection(model))  # type: ignore[attr-defined]
            self.logger.info(
                f"{model.__name__} bound to {self.settings.database}.{ModelRegistry.get(model).collection}"
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
