"""
Postgres connection via ibis.

ibis commits after every ``raw_sql`` call on Postgres, so migration
statements bypass it and run on the psycopg connection directly, with
autocommit switched off for the duration of a deployment transaction.
"""

from typing import Any

import ibis

from sqldeploy.connections.base import BaseConnection
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.connections.postgres")


class PostgresConnection(BaseConnection):
    """Postgres connection wrapper using ibis."""

    def __init__(self, name: str, config: dict[str, Any]):
        super().__init__(name, config)
        self._restore_autocommit = False

    @property
    def db_config(self) -> dict[str, Any]:
        """Connection parameters from the ``config`` block of the connection."""
        return self.config.get("config", {})

    @property
    def connection(self) -> ibis.BaseBackend:
        """
        Get Postgres connection via ibis (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis Postgres backend
        """
        if self._connection is None:
            db_config = self.db_config
            self._connection = ibis.postgres.connect(
                host=db_config.get("host", "localhost"),
                port=int(db_config.get("port", 5432)),
                user=db_config.get("user", ""),
                password=db_config.get("password", ""),
                database=db_config.get("database", ""),
            )
            logger.debug(f"Connected to Postgres database '{db_config.get('database', '')}' as '{self.name}'")

        return self._connection

    def current_user(self) -> str:
        return self.db_config.get("user") or super().current_user()

    def _autocommit(self) -> None:
        if not self.dbapi.autocommit:
            self.dbapi.commit()

    def _begin(self) -> None:
        con = self.dbapi
        if con.autocommit:
            con.autocommit = False
            self._restore_autocommit = True
        else:
            # Close any implicit transaction left open by earlier reads
            con.commit()

    def _end(self) -> None:
        if self._restore_autocommit:
            self.dbapi.autocommit = True
            self._restore_autocommit = False
