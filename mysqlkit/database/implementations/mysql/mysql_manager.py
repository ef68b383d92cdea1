"""MySQL database manager: runs built statements on a pooled async engine."""

import re
from collections.abc import AsyncIterator, Awaitable, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.pool import QueuePool

from mysqlkit.config import Settings
from mysqlkit.database.engine import create_database_engine
from mysqlkit.database.interfaces.manager import DatabaseManager
from mysqlkit.database.interfaces.statement_builder import StatementBuilder
from mysqlkit.database.observer import ObserverGroup, PoolObserver
from mysqlkit.database.schema import ColumnSpec
from mysqlkit.database.statement import QueryMetadata, QueryOutcome, Statement
from mysqlkit.exceptions import PoolError, QueryError, RollbackError
from mysqlkit.log import get_logger
from mysqlkit.types import ExecutionMode

from .statement_builder import MySQLStatementBuilder

logger = get_logger(__name__)

_CHANGED_ROWS = re.compile(r"Changed:\s*(\d+)")


class MySQLManager(DatabaseManager):
    """Executor for MySQL/MariaDB on top of a SQLAlchemy async engine.

    The engine owns the pool and the driver; this class builds statements,
    scopes transactions and normalizes results.

    Usage:
        async with MySQLManager(load_settings()) as db:
            await db.create_table("t", [{"name": "c1", "type": "varchar(255)"}], ["c1"])
            await db.multi_insert("t", ["c1"], [["a"], ["b"]])
            rows, meta = await db.query("SELECT * FROM t")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        engine: AsyncEngine | None = None,
        builder: StatementBuilder | None = None,
        observers: list[PoolObserver] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            settings: Connection settings, defaults to ``Settings()``
            engine: Existing engine to use instead of one built from settings
            builder: Statement builder, defaults to one matching the driver
            observers: Pool lifecycle observers
        """
        self.settings = settings or Settings()
        self._engine = engine
        paramstyle = engine.dialect.paramstyle if engine is not None else "format"
        self._builder = builder or MySQLStatementBuilder(paramstyle)
        self._observers = ObserverGroup(observers)
        self._database: str | None = None
        self._connected = False

    async def connect(self) -> None:
        """Create the engine if needed and start listening to pool events."""
        if self._connected:
            return

        if self._engine is None:
            self._engine = create_database_engine(self.settings)

        self._attach_events()
        self._connected = True
        logger.info(f"Connected to {self._engine.url.render_as_string()}")

    async def close(self) -> None:
        """Close all pooled connections."""
        if not self._connected or self._engine is None:
            return

        self._detach_events()
        self._connected = False
        try:
            await self._engine.dispose()
        except SQLAlchemyError as e:
            logger.error(f"Failed to close connection pool: {e}")
            raise PoolError(f"Failed to close connection pool: {e}", error=e) from e
        logger.info("Closed connection pool")

    @property
    def engine(self) -> AsyncEngine:
        """Get the engine owning the pool."""
        if not self._connected or self._engine is None:
            raise RuntimeError("Database not connected")
        return self._engine

    @property
    def builder(self) -> StatementBuilder:
        """Get the statement builder."""
        return self._builder

    @property
    def is_connected(self) -> bool:
        """Check if the pool is ready."""
        return self._connected

    @property
    def database(self) -> str | None:
        """Schema selected with ``use_database``, if any."""
        return self._database

    def add_observer(self, observer: PoolObserver) -> None:
        """Register a pool lifecycle observer."""
        self._observers.add(observer)

    def remove_observer(self, observer: PoolObserver) -> None:
        """Unregister a pool lifecycle observer."""
        self._observers.remove(observer)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """Borrow one autocommit connection from the pool.

        The connection goes back to the pool when the block exits, whatever
        happens inside it.
        """
        connection = await self._acquire()
        try:
            await connection.execution_options(isolation_level="AUTOCOMMIT")
            yield connection
        finally:
            await connection.close()

    async def execute(
        self, statement: Statement, connection: AsyncConnection | None = None
    ) -> QueryOutcome:
        """Execute one statement.

        Args:
            statement: Statement to run
            connection: Connection to run it on, or None to borrow one

        Returns:
            Rows and metadata of the statement

        Raises:
            QueryError: If the driver reports a failure
            PoolError: If no connection could be acquired
        """
        if connection is not None:
            return await self._run(statement, connection)

        async with self.connection() as borrowed:
            return await self._run(statement, borrowed)

    async def query(
        self,
        sql: str | Statement,
        params: Sequence[Any] | None = None,
        connection: AsyncConnection | None = None,
    ) -> QueryOutcome:
        """Execute raw SQL, or a statement with replacement parameters.

        Args:
            sql: SQL text or statement
            params: Parameters; for a statement, they replace its own
            connection: Connection to run on, or None to borrow one

        Returns:
            Rows and metadata of the statement
        """
        if isinstance(sql, Statement):
            statement = sql if params is None else Statement(sql.sql, tuple(params))
        else:
            statement = Statement(sql, tuple(params or ()))
        return await self.execute(statement, connection)

    async def transaction(self, statements: Sequence[Statement]) -> list[QueryOutcome]:
        """Execute statements in order inside one transaction.

        The connection is held exclusively until commit or rollback and is
        always released. Nothing is returned for a rolled back batch.

        Args:
            statements: Statements to run

        Returns:
            One outcome per statement

        Raises:
            QueryError: The failure that caused the rollback
            RollbackError: If the rollback itself failed
        """
        connection = await self._acquire()
        try:
            outcomes: list[QueryOutcome] = []
            try:
                await self._control(connection.begin(), "BEGIN")
                for statement in statements:
                    outcomes.append(await self._run(statement, connection))
                await self._control(connection.commit(), "COMMIT")
            except Exception as e:
                await self._rollback(connection, e)
                raise
            return outcomes
        finally:
            await connection.close()

    execute_transaction = transaction

    async def create_table(
        self,
        table: str,
        columns: Sequence[ColumnSpec | dict[str, Any]],
        primary_key: Sequence[str],
        table_options: str | None = None,
        mode: ExecutionMode = ExecutionMode.TRANSACTION,
    ) -> None:
        """Create a table with its unique indexes and foreign keys.

        Args:
            table: Table name
            columns: Column specs
            primary_key: Primary key column names
            table_options: Table options, defaults to ``settings.table_options``
            mode: Run the statements in one transaction or one by one
        """
        options = table_options if table_options is not None else self.settings.table_options
        statements = self._builder.build_create_table(table, columns, primary_key, options)
        await self._run_statements(statements, mode)
        logger.info(f"Created table {table} ({len(statements)} statements)")

    async def drop_table(self, tables: str | Sequence[str]) -> QueryOutcome:
        """Drop one or more tables if they exist."""
        outcome = await self.execute(self._builder.build_drop_table(tables))
        logger.info(f"Dropped table(s) {tables}")
        return outcome

    async def list_tables(self) -> list[str]:
        """List the tables of the current schema."""
        rows, _ = await self.execute(self._builder.build_list_tables())
        return [str(next(iter(row.values()))) for row in rows]

    async def use_database(self, database: str) -> None:
        """Switch the current schema for every connection handed out later.

        Raises:
            QueryError: If the schema does not exist or is not accessible
        """
        await self.execute(self._builder.build_use_database(database))
        self._database = database
        logger.info(f"Using database {database}")

    async def multi_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        mode: ExecutionMode = ExecutionMode.TRANSACTION,
    ) -> QueryOutcome:
        """Insert many rows with a single statement."""
        statement = self._builder.build_multi_insert(table, columns, rows)
        return (await self._run_statements([statement], mode))[0]

    async def multi_update(
        self,
        table: str,
        primary_key: Sequence[str],
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        mode: ExecutionMode = ExecutionMode.TRANSACTION,
    ) -> QueryOutcome:
        """Insert rows, overwriting non-key columns of rows whose key exists."""
        statement = self._builder.build_multi_update(table, primary_key, columns, rows)
        return (await self._run_statements([statement], mode))[0]

    async def _run_statements(
        self, statements: Sequence[Statement], mode: ExecutionMode
    ) -> list[QueryOutcome]:
        if ExecutionMode(mode) is ExecutionMode.TRANSACTION:
            return await self.transaction(statements)
        return [await self.execute(statement) for statement in statements]

    async def _run(self, statement: Statement, connection: AsyncConnection) -> QueryOutcome:
        logger.debug(f"Executing: {statement.sql} {statement.params}")
        # Without parameters the driver must not apply %-formatting to the SQL
        options = {} if statement.params else {"no_parameters": True}
        try:
            result = await connection.exec_driver_sql(
                statement.sql, statement.params or None, execution_options=options
            )
        except Exception as e:
            error = _driver_error(e)
            logger.error(f"Query failed: {error} [{statement.sql}]")
            raise QueryError(
                f"Query failed: {error}",
                error=error,
                sql=statement.sql,
                params=statement.params,
            ) from e
        return _to_outcome(result)

    async def _acquire(self) -> AsyncConnection:
        engine = self.engine
        if self._pool_exhausted(engine):
            self._observers.notify("enqueue")
        try:
            return await engine.connect()
        except Exception as e:
            error = _driver_error(e)
            logger.error(f"Failed to acquire connection: {error}")
            raise PoolError(f"Failed to acquire connection: {error}", error=error) from e

    async def _control(self, step: Awaitable[Any], sql: str) -> None:
        try:
            await step
        except SQLAlchemyError as e:
            error = _driver_error(e)
            logger.error(f"{sql} failed: {error}")
            raise QueryError(f"{sql} failed: {error}", error=error, sql=sql) from e

    async def _rollback(self, connection: AsyncConnection, cause: BaseException) -> None:
        try:
            await connection.rollback()
        except SQLAlchemyError as e:
            error = _driver_error(e)
            logger.error(f"Rollback failed after '{cause}': {error}")
            raise RollbackError(
                f"Rollback failed: {error}", error=error, original_error=cause
            ) from e
        logger.warning(f"Transaction rolled back: {cause}")

    def _pool_exhausted(self, engine: AsyncEngine) -> bool:
        pool = engine.pool
        if not isinstance(pool, QueuePool):
            return False
        # A negative overflow means the pool never blocks
        if pool._max_overflow < 0:
            return False
        return pool.checkedout() >= pool.size() + pool._max_overflow

    def _attach_events(self) -> None:
        assert self._engine is not None
        target = self._engine.sync_engine
        event.listen(target, "connect", self._on_connect)
        event.listen(target, "checkout", self._on_checkout)
        event.listen(target, "checkin", self._on_checkin)
        event.listen(target, "handle_error", self._on_handle_error)

    def _detach_events(self) -> None:
        assert self._engine is not None
        target = self._engine.sync_engine
        for name, listener in (
            ("connect", self._on_connect),
            ("checkout", self._on_checkout),
            ("checkin", self._on_checkin),
            ("handle_error", self._on_handle_error),
        ):
            if event.contains(target, name, listener):
                event.remove(target, name, listener)

    def _on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["database"] = self.settings.database
        self._observers.notify("connection", dbapi_connection)

    def _on_checkout(
        self, dbapi_connection: Any, connection_record: Any, connection_proxy: Any
    ) -> None:
        database = self._database
        if database is not None and connection_record.info.get("database") != database:
            try:
                cursor = dbapi_connection.cursor()
                try:
                    cursor.execute(self._builder.build_use_database(database).sql)
                finally:
                    cursor.close()
            except Exception as e:
                # Hand the connection back so the failed checkout does not leak it
                connection_proxy.invalidate(e)
                raise
            connection_record.info["database"] = database
        self._observers.notify("acquire", dbapi_connection)

    def _on_checkin(self, dbapi_connection: Any, connection_record: Any) -> None:
        self._observers.notify("release", dbapi_connection)

    def _on_handle_error(self, context: Any) -> None:
        self._observers.notify("error", context.original_exception)


def _driver_error(error: Exception) -> BaseException:
    """Unwrap the DBAPI exception SQLAlchemy wraps driver failures in."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return error.orig
    return error


def _to_outcome(result: CursorResult[Any]) -> QueryOutcome:
    if result.returns_rows:
        rows = [dict(row) for row in result.mappings()]
        return QueryOutcome(rows=rows, meta=QueryMetadata(length=len(rows)))

    return QueryOutcome(
        rows=[],
        meta=QueryMetadata(
            changed_rows=_changed_rows(result),
            affected_rows=max(result.rowcount, 0),
            insert_id=result.lastrowid or 0,
        ),
    )


def _changed_rows(result: CursorResult[Any]) -> int:
    """Read ``Changed: N`` from the server's info message when the driver keeps it."""
    cursor = getattr(result.context, "cursor", None)
    # Async adapted cursors keep the driver cursor on ``_cursor``
    cursor = getattr(cursor, "_cursor", cursor)
    message = getattr(getattr(cursor, "_result", None), "message", None)
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    if not message:
        return 0

    match = _CHANGED_ROWS.search(message)
    return int(match.group(1)) if match else 0
