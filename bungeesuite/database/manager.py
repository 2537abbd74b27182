"""
Connection pool ownership and the query/update API.

A ConnectionManager owns exactly one psycopg connection pool for one database
target. Construction is fail-fast: the driver is loaded and a connection is
leased and returned before the manager is handed to anyone. After that the
manager holds no mutable state of its own; thread safety comes from the pool.

Release responsibility:

- `update(sql, ...)`, `single_result_query`, `single_result_string_query` and
  `existence_query` lease and release their own connection.
- `connection()` is a scoped lease; the connection is released on exit.
- `acquire()` hands the connection to the caller, who must `release()` it.
- Methods taking a `connection` argument never release it.

Example
-------
    manager = ConnectionManager("localhost", "bungeesuite", "5432", "postgres", "secret")
    manager.update("INSERT INTO players (uuid, name) VALUES (?, ?)", uuid, name)

    with manager.connection() as conn:
        with conn.transaction():
            manager.update("UPDATE homes SET x = ? WHERE id = ?", 10, 1, connection=conn)
            manager.update("DELETE FROM warps WHERE id = ?", 4, connection=conn)
"""

from __future__ import annotations

import atexit
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Generator, Optional, Sequence, Tuple, Union

from bungeesuite.database.driver import Driver, load_driver
from bungeesuite.database.errors import ConnectionFailure, OperationFailure, QueryFailure
from bungeesuite.database.models import PoolConfiguration
from bungeesuite.database.placeholders import translate
from bungeesuite.utils.logging import get_logger

if TYPE_CHECKING:
    from psycopg import Connection, Cursor

    from bungeesuite.config import Settings

log = get_logger(__name__)

# pg_class lists every relation whatever the role's privileges on it.
_TABLE_EXISTS_SQL = (
    "SELECT 1 FROM pg_catalog.pg_class c"
    " JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace"
    " WHERE c.relname = %s AND c.relkind IN ('r', 'p', 'f', 'v', 'm')"
    " LIMIT 1"
)


class _SqlNull:
    """Marker for a result cell holding SQL NULL."""

    _instance: Optional["_SqlNull"] = None

    def __new__(cls) -> "_SqlNull":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SQL_NULL"

    def __bool__(self) -> bool:
        return False


SQL_NULL = _SqlNull()


class ConnectionManager:
    """
    Pooled, thread-safe access to one PostgreSQL database.

    Parameters
    ----------
    host : str
        Database server host.
    database : str
        Database name.
    port : Union[str, int]
        Database server port.
    username : str
        Login role.
    password : str
        Login password.
    min_size : int
        Connections the pool keeps open while idle.
    max_size : int
        Maximum number of connections the pool will open.
    timeout : float
        Seconds `acquire()` waits for a free connection before failing.

    Raises
    ------
    DependencyUnavailable
        If the driver cannot be loaded. No connection is attempted.
    ConnectionFailure
        If the pool cannot lease a connection. The pool is closed first.
    """

    def __init__(
        self,
        host: str,
        database: str,
        port: Union[str, int],
        username: str,
        password: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 30.0,
    ) -> None:
        self._driver: Driver = load_driver()
        self.config = PoolConfiguration(
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            min_size=min_size,
            max_size=max_size,
            timeout=timeout,
        )
        self._pool = self._driver.pool_class(
            conninfo=self.config.conninfo,
            kwargs=self.config.connect_kwargs(),
            min_size=self.config.min_size,
            max_size=self.config.max_size,
            timeout=self.config.timeout,
            open=False,
        )
        try:
            self._pool.open()
            self.release(self.acquire())
        except BaseException as exc:
            # Any interruption, KeyboardInterrupt included, closes the pool.
            self._pool.close()
            log.error("Database connectivity check failed", extra={"target": self.config.conninfo})
            if isinstance(exc, self._driver.error):
                raise ConnectionFailure(
                    f"Could not open connection pool for {self.config.conninfo}", exc
                ) from exc
            raise
        atexit.register(self._pool.close)
        log.info(
            "Connection pool ready",
            extra={
                "target": self.config.conninfo,
                "min_size": self.config.min_size,
                "max_size": self.config.max_size,
            },
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ConnectionManager":
        """Build a manager for the database target described by `settings`."""
        return cls(
            settings.db_host,
            settings.db_name,
            settings.db_port,
            settings.db_user,
            settings.db_password.get_secret_value(),
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            timeout=settings.pool_timeout,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config.conninfo!r})"

    # Leasing

    def acquire(self) -> "Connection[Any]":
        """
        Lease a connection from the pool.

        The caller owns the returned connection and must pass it to `release()`.
        Prefer `connection()` unless the lease has to outlive a single block.

        Raises
        ------
        ConnectionFailure
            If the pool is closed, misconfigured, exhausted past its timeout, or
            cannot reach the server.
        """
        try:
            conn = self._pool.getconn()
        except self._driver.error as exc:
            log.warning("Could not lease a connection", extra={"target": self.config.conninfo})
            raise ConnectionFailure(
                f"Could not obtain a connection to {self.config.conninfo}", exc
            ) from exc
        log.debug("Connection leased", extra={"target": self.config.conninfo})
        return conn

    def release(self, connection: "Connection[Any]") -> None:
        """Return a connection obtained from `acquire()` to the pool."""
        self._pool.putconn(connection)
        log.debug("Connection released", extra={"target": self.config.conninfo})

    @contextmanager
    def connection(self) -> Generator["Connection[Any]", None, None]:
        """
        Context manager leasing a connection for the duration of the block.

        The connection is released on exit, whether or not the block raised.
        """
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    def pool_stats(self) -> Dict[str, int]:
        """Return the pool's own counters (size, available, waiting, ...)."""
        return dict(self._pool.get_stats())

    # Statements

    def _prepare(
        self, sql: str, params: Sequence[Any]
    ) -> Tuple[str, Optional[Tuple[Any, ...]]]:
        query = translate(sql, len(params))
        if not params:
            # Without bound parameters the driver does not parse `%`.
            return sql, None
        return query, tuple(params)

    def update(
        self,
        sql: str,
        *params: Any,
        connection: Optional["Connection[Any]"] = None,
    ) -> int:
        """
        Execute an INSERT, UPDATE, DELETE or DDL statement.

        Parameters
        ----------
        sql : str
            Statement with positional `?` placeholders.
        *params : Any
            Values bound to the placeholders, in order.
        connection : Optional[Connection]
            Connection to run on. When given, it is left open for the caller;
            otherwise one is leased and released around the statement.

        Returns
        -------
        int
            Number of affected rows (-1 for statements that report none).

        Raises
        ------
        ConnectionFailure
            If no connection could be leased.
        QueryFailure
            On placeholder mismatch, malformed SQL, constraint violations or
            lost connectivity.
        """
        if connection is None:
            with self.connection() as conn:
                return self.update(sql, *params, connection=conn)

        query, bound = self._prepare(sql, params)
        try:
            with connection.cursor() as cursor:
                cursor.execute(query, bound)
                return cursor.rowcount
        except self._driver.error as exc:
            log.warning("Update failed", extra={"sql": sql})
            raise QueryFailure("Update failed", exc) from exc

    def query(self, connection: "Connection[Any]", sql: str, *params: Any) -> "Cursor[Any]":
        """
        Execute a statement returning rows on the caller's connection.

        The caller owns the returned cursor and must close it, along with the
        connection once it is done with it.

        Raises
        ------
        QueryFailure
            If the statement cannot be executed.
        """
        query, bound = self._prepare(sql, params)
        cursor = connection.cursor()
        try:
            cursor.execute(query, bound)
        except self._driver.error as exc:
            cursor.close()
            log.warning("Query failed", extra={"sql": sql})
            raise QueryFailure("Query failed", exc) from exc
        return cursor

    def _first_row(self, sql: str, params: Sequence[Any]) -> Optional[Sequence[Any]]:
        with self.connection() as conn:
            cursor = self.query(conn, sql, *params)
            try:
                return cursor.fetchone()
            except self._driver.error as exc:
                log.warning("Reading query result failed", extra={"sql": sql})
                raise QueryFailure("Could not read query result", exc) from exc
            finally:
                cursor.close()

    def single_result_query(self, sql: str, *params: Any) -> Any:
        """
        Return the first column of the first row.

        Returns
        -------
        Any
            None when the query matched no rows, SQL_NULL when the first
            column holds NULL, the value otherwise.
        """
        row = self._first_row(sql, params)
        if row is None:
            return None
        if len(row) == 0:
            raise QueryFailure("Query returned a row with no columns")
        value = row[0]
        return SQL_NULL if value is None else value

    def single_result_string_query(self, sql: str, *params: Any) -> Optional[str]:
        """
        Return the first column of the first row as the server renders it.

        The text comes straight from the result, so a boolean reads "t" and a
        bytea reads "\\x...", as psql would show them. None when the query
        matched no rows, an empty string when the first column holds NULL.
        """
        with self.connection() as conn:
            cursor = self.query(conn, sql, *params)
            try:
                result = cursor.pgresult
                if result is None or result.ntuples == 0:
                    return None
                if result.nfields == 0:
                    raise QueryFailure("Query returned a row with no columns")
                raw = result.get_value(0, 0)
            finally:
                cursor.close()
            if raw is None:
                return ""
            return bytes(raw).decode(conn.info.encoding)

    def existence_query(self, sql: str, *params: Any) -> bool:
        """Return True if the query matched at least one row."""
        return self._first_row(sql, params) is not None

    def does_table_exist(self, connection: "Connection[Any]", table_name: str) -> bool:
        """
        Check the catalog for a table named `table_name` in any schema.

        Runs on the caller's connection and does not release it.

        Raises
        ------
        OperationFailure
            If the catalog cannot be read.
        """
        try:
            with connection.cursor() as cursor:
                cursor.execute(_TABLE_EXISTS_SQL, (table_name,))
                return cursor.fetchone() is not None
        except self._driver.error as exc:
            log.warning("Catalog lookup failed", extra={"table": table_name})
            raise OperationFailure(f"Could not look up table {table_name!r}", exc) from exc


__all__ = ["ConnectionManager", "SQL_NULL"]
