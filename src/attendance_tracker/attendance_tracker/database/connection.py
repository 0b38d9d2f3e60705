from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector
from mysql.connector import errors as mysql_errors
from mysql.connector.constants import ClientFlag

from ..core.constants import DEFAULT_STORE_TIMEOUT_SECONDS
from ..core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = DEFAULT_STORE_TIMEOUT_SECONDS

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_tracker")),
            connect_timeout=int(db_config.get("connect_timeout", DEFAULT_STORE_TIMEOUT_SECONDS)),
        )


class DatabaseConnection:
    """DB connection factory handed to every repository.

    Note: We create short-lived connections per operation. The pure-Python
    connector applies ``connection_timeout`` to the socket, so reads and
    writes are bounded too, not only the handshake.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                connection_timeout=int(self._config.connect_timeout),
                use_pure=True,
                # rowcount reports matched rows, so an unchanged UPDATE still counts.
                client_flags=[ClientFlag.FOUND_ROWS],
            )
        except (mysql_errors.InterfaceError, mysql_errors.OperationalError) as exc:
            logger.error("Database unreachable at %s:%s - %s", self._config.host, self._config.port, exc)
            raise StoreUnavailableError("Attendance store is unavailable") from exc
