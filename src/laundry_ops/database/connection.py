from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlsplit

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, url: Optional[str], service_key: Optional[str]) -> Optional["DBConfig"]:
        """Build a config from the connection URL and the service key.

        Returns None when either is missing, which callers treat as
        "store not configured".
        """
        if not url or not service_key:
            return None
        parts = urlsplit(url)
        if not parts.hostname:
            return None
        return cls(
            host=parts.hostname,
            port=int(parts.port or 3306),
            user=unquote(parts.username or "root"),
            password=service_key,
            database=parts.path.lstrip("/") or "laundryops",
        )

    def as_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """DB connection factory, one per container.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        # FOUND_ROWS makes UPDATE report matched rows, not only changed ones.
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
