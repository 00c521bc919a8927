"""Table store - SQL execution against one logical table.

The store holds an externally supplied connection for its whole lifetime and
never opens or closes it. Every operation runs as its own unit of work
(execute, then commit; roll back on failure), and statement execution is
serialized with a lock so one connection can be shared between threads.

Failures are never raised past this layer (except during schema creation);
they come back as ``StorageFailure`` so callers can tell them apart from a
genuine ``NotFound``.
"""

from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager
import threading
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
import structlog

from .errors import RowMappingError, SchemaInitializationError
from .mapping import PropertyMap, properties_to_parameters, row_to_properties
from .results import Found, NotFound, StorageFailure
from .tables import TableDescriptor

logger = structlog.get_logger(__name__)


class TableStore:
    """Executes statements for a single table over a shared connection."""

    def __init__(
        self,
        connection: Connection,
        descriptor: TableDescriptor,
        lock: AbstractContextManager | None = None,
    ):
        """Pass the same lock to every store built on one connection."""
        self.connection = connection
        self.descriptor = descriptor
        self._lock = lock if lock is not None else threading.RLock()

    @contextmanager
    def _unit_of_work(self) -> Iterator[Connection]:
        with self._lock:
            try:
                yield self.connection
                self.connection.commit()
            except Exception:
                self._rollback()
                raise

    def _rollback(self) -> None:
        try:
            self.connection.rollback()
        except SQLAlchemyError:
            logger.warning("rollback_failed", table=self.descriptor.name, exc_info=True)

    def _failure(self, operation: str, error: Exception, **context: Any) -> StorageFailure:
        logger.error(
            "storage_operation_failed",
            table=self.descriptor.name,
            operation=operation,
            exc_info=error,
            **context,
        )
        return StorageFailure(operation=operation, cause=error)

    def ensure_schema(self) -> None:
        """Create the table if it does not exist yet.

        Raises:
            SchemaInitializationError: If the database rejects the statement.
        """
        try:
            with self._unit_of_work() as conn:
                self.descriptor.table.create(conn, checkfirst=True)
        except SQLAlchemyError as e:
            raise SchemaInitializationError(
                f"Failed to create table {self.descriptor.name}"
            ) from e
        logger.debug("schema_ready", table=self.descriptor.name)

    def find_by_key(self, key: str) -> Found[PropertyMap] | NotFound | StorageFailure:
        """Point lookup by primary key."""
        statement = select(self.descriptor.table).where(self.descriptor.key_column == key)
        try:
            with self._unit_of_work() as conn:
                row = conn.execute(statement).mappings().first()
        except SQLAlchemyError as e:
            return self._failure("find_by_key", e, key=key)

        properties = row_to_properties(self.descriptor, row)
        if not properties:
            return NotFound(key=key)
        return Found(properties)

    def upsert(
        self, key: str, properties: Mapping[str, Any]
    ) -> Found[PropertyMap] | StorageFailure:
        """Insert the row, or overwrite it when the key already exists.

        Returns the stored properties (defaults applied) on success.
        """
        try:
            parameters = properties_to_parameters(self.descriptor, key, properties)
        except RowMappingError as e:
            return self._failure("upsert", e, key=key)

        values = {name: v for name, v in parameters.items() if name != self.descriptor.key.name}
        table = self.descriptor.table
        try:
            with self._unit_of_work() as conn:
                result = conn.execute(
                    update(table).where(self.descriptor.key_column == key).values(**values)
                )
                created = result.rowcount == 0
                if created:
                    conn.execute(insert(table).values(**parameters))
        except SQLAlchemyError as e:
            return self._failure("upsert", e, key=key)

        logger.info("record_stored", table=self.descriptor.name, key=key, created=created)
        return Found(
            {column.prop: parameters[column.name] for column in self.descriptor.columns}
        )

    def delete(self, key: str) -> Found[None] | StorageFailure:
        """Delete by primary key. A missing key is not an error."""
        statement = delete(self.descriptor.table).where(self.descriptor.key_column == key)
        try:
            with self._unit_of_work() as conn:
                result = conn.execute(statement)
        except SQLAlchemyError as e:
            return self._failure("delete", e, key=key)

        logger.info("record_deleted", table=self.descriptor.name, key=key, rows=result.rowcount)
        return Found(None)

    def list_keys(self) -> Found[list[str]] | StorageFailure:
        """All primary keys currently stored, in no particular order."""
        statement = select(self.descriptor.key_column)
        try:
            with self._unit_of_work() as conn:
                keys = [str(key) for key in conn.execute(statement).scalars()]
        except SQLAlchemyError as e:
            return self._failure("list_keys", e)
        return Found(keys)
