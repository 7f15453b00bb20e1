"""
Connection settings loaded from the environment (and a .env file)
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class MongoSettings:
    """MongoDB connection settings"""
    uri: str = "mongodb://localhost:27017"
    database: str = "default"
    max_pool_size: int = 10
    min_pool_size: int = 1
    server_selection_timeout_ms: int = 5000

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "MongoSettings":
        """
        Read MONGODB_URI, MONGODB_DATABASE, MONGODB_MAX_POOL_SIZE,
        MONGODB_MIN_POOL_SIZE and MONGODB_SERVER_SELECTION_TIMEOUT_MS.
        """
        if load_env_file:
            load_dotenv()

        return cls(
            uri=os.getenv("MONGODB_URI", cls.uri),
            database=os.getenv("MONGODB_DATABASE", cls.database),
            max_pool_size=int(os.getenv("MONGODB_MAX_POOL_SIZE", str(cls.max_pool_size))),
            min_pool_size=int(os.getenv("MONGODB_MIN_POOL_SIZE", str(cls.min_pool_size))),
            server_selection_timeout_ms=int(
                os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", str(cls.server_selection_timeout_ms))
            ),
        )
