"""Resource data factory - the entry point used by the resource tree.

Maps paths under a configured root onto the supported tables:

    <root>/accounts            table resource {"tableName": "ACCOUNTS"}
    <root>/accounts/{userid}   record resource with the row's fields

Malformed paths never raise: reads return None, writes log a warning and do
nothing. Storage failures are folded into None / no-op unless the factory was
built with ``strict=True``, in which case they raise StorageUnavailableError.
"""

import threading
from typing import Any

from sqlalchemy.engine import Connection
import structlog

from .errors import ConfigurationError, StorageUnavailableError
from .mapping import PropertyMap
from .paths import SEPARATOR, ResourcePath, ensure_trailing_slash
from .resources import RecordResourceData, ResourceData, TableResourceData
from .results import Found, NotFound, StorageFailure
from .store import TableStore
from .tables import SupportedTable

logger = structlog.get_logger(__name__)


class ResourceDataFactory:
    """Get, put and list resources backed by SQL tables."""

    def __init__(self, connection: Connection, root_path: str | None, strict: bool = False):
        """Bind to a live connection and bootstrap the schema.

        Args:
            connection: Open connection owned by the caller.
            root_path: Tree prefix handled by this factory.
            strict: Raise StorageUnavailableError instead of masking failures.

        Raises:
            ConfigurationError: If root_path is missing.
            SchemaInitializationError: If a table cannot be created.
        """
        if not root_path:
            raise ConfigurationError("Resource data factory requires a root path")

        self.root_path = ensure_trailing_slash(root_path)
        self.strict = strict
        self._closed = False
        # One lock per connection; every store on it shares this
        self._lock = threading.RLock()

        self._stores: dict[SupportedTable, TableStore] = {}
        for table in SupportedTable:
            store = TableStore(connection, table.descriptor, lock=self._lock)
            store.ensure_schema()
            self._stores[table] = store

        # Static table-level nodes, so a table resolves before it has rows
        self._table_resources: dict[SupportedTable, TableResourceData] = {
            table: TableResourceData(
                path=self.root_path + table.value.lower(),
                properties={"tableName": table.descriptor.name},
            )
            for table in SupportedTable
        }

    def _unwrap(
        self, result: Found[Any] | NotFound | StorageFailure, operation: str, path: str
    ) -> Any:
        if isinstance(result, Found):
            return result.value
        if isinstance(result, NotFound):
            return None
        if isinstance(result, StorageFailure) and self.strict:
            raise StorageUnavailableError(operation, path) from result.cause
        return None

    def get(self, path: str) -> ResourceData | None:
        """Resolve path to a table or record resource, or None."""
        resource_path = ResourcePath.parse(self.root_path, path)
        logger.info("get_resource_data", relative_path=resource_path.relative)

        if not (resource_path.is_table or resource_path.is_row):
            return None

        table = SupportedTable.lookup(resource_path.table_name)
        if table is None:
            return None

        if resource_path.is_table:
            return self._table_resources[table].model_copy(update={"path": path}, deep=True)

        result = self._stores[table].find_by_key(resource_path.row_key)
        properties = self._unwrap(result, "get", path)
        if properties is None:
            return None
        return RecordResourceData(path=path, properties=properties)

    def put(self, path: str, resource: ResourceData | None) -> PropertyMap | None:
        """Store resource at a row-level path; None deletes the row.

        Returns the row as stored (an empty map after a deletion), or None
        when the write was rejected or failed.
        """
        resource_path = ResourcePath.parse(self.root_path, path)
        if not resource_path.is_row:
            logger.warning("put_wrong_level", relative_path=resource_path.relative)
            return None

        table = SupportedTable.lookup(resource_path.table_name)
        if table is None:
            logger.warning("put_unsupported_table", table=resource_path.table_name)
            return None

        store = self._stores[table]
        key = resource_path.row_key
        if resource is None:
            result = store.delete(key)
            self._unwrap(result, "delete", path)
            return {} if isinstance(result, Found) else None
        return self._unwrap(store.upsert(key, resource.properties), "put", path)

    def list_children(self, path: str) -> list[str]:
        """Child paths of a table; rows and unknown paths have none."""
        resource_path = ResourcePath.parse(self.root_path, path)
        if resource_path.is_record_path:
            return []

        table = SupportedTable.lookup(resource_path.relative)
        if table is None:
            return []

        keys = self._unwrap(self._stores[table].list_keys(), "list_children", path)
        if not keys:
            return []
        return [path + SEPARATOR + key for key in keys]

    def is_live(self) -> bool:
        return not self._closed

    def close(self) -> None:
        self._closed = True
