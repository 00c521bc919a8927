"""Provider factory - binds resource providers to a data source.

The data source is a SQLAlchemy ``Engine`` handed in by whoever manages it.
The factory is activated with settings, then told explicitly when a data
source appears (bind), changes (rebind) or goes away (unbind). While bound it
owns exactly one open connection and the data factory built on top of it.
"""

import threading

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
import structlog

from .config import Settings
from .errors import ConfigurationError, ProviderUnavailableError, ResourceProviderError
from .facade import ResourceDataFactory
from .provider import ResourceProvider

logger = structlog.get_logger(__name__)


class ResourceProviderFactory:
    """Hands out resource providers for one named data source."""

    def __init__(self):
        self.datasource_name: str | None = None
        self.root_path: str | None = None
        self.strict = False

        self._lock = threading.RLock()
        self._engine: Engine | None = None
        self._connection: Connection | None = None
        self._data_factory: ResourceDataFactory | None = None

    @property
    def is_bound(self) -> bool:
        return self._data_factory is not None

    def activate(self, settings: Settings) -> None:
        """Take configuration; data sources can be bound afterwards.

        Raises:
            ConfigurationError: If the data source name is missing.
        """
        if not settings.datasource_name:
            raise ConfigurationError("Configuration is missing datasource_name")

        self.datasource_name = settings.datasource_name
        self.root_path = settings.root_path
        self.strict = settings.strict_storage_errors
        logger.info("provider_factory_activated", datasource=self.datasource_name)

    def deactivate(self) -> None:
        logger.info("provider_factory_deactivating", datasource=self.datasource_name)
        with self._lock:
            if self._engine is not None:
                self._unregister()

    def bind_data_source(self, name: str, engine: Engine) -> bool:
        """Bind engine if it carries our data source name and nothing is bound yet.

        Returns True when the engine is bound afterwards.
        """
        if self.datasource_name is None:
            raise ConfigurationError("Provider factory is not activated")
        if name != self.datasource_name:
            logger.debug("data_source_ignored", datasource=name)
            return False

        with self._lock:
            if self._engine is not None:
                logger.info("data_source_already_bound", datasource=name)
                return False
            self._register(engine)
            return self._engine is engine

    def rebind_data_source(self, name: str, engine: Engine) -> bool:
        """Replace the bound data source after it was modified."""
        if name != self.datasource_name:
            return False

        with self._lock:
            if self._engine is None:
                return False
            logger.info("data_source_updating", datasource=name)
            self._unregister()
            self._register(engine)
            return self._engine is engine

    def unbind_data_source(self, engine: Engine) -> None:
        """Drop engine if it is the bound one."""
        with self._lock:
            if engine is not self._engine:
                return
            logger.info("data_source_removed", datasource=self.datasource_name)
            self._unregister()

    def get_resource_provider(self) -> ResourceProvider:
        """Build a provider over the bound data source.

        Raises:
            ProviderUnavailableError: If no data source is bound.
        """
        data_factory = self._data_factory
        if data_factory is None:
            raise ProviderUnavailableError(
                f"No data source named {self.datasource_name} is bound"
            )
        logger.info("resource_provider_requested", root_path=self.root_path)
        return ResourceProvider(data_factory)

    def _register(self, engine: Engine) -> None:
        connection = None
        try:
            connection = engine.connect()
            data_factory = ResourceDataFactory(connection, self.root_path, strict=self.strict)
        except (SQLAlchemyError, ResourceProviderError):
            logger.exception("data_source_bind_failed", datasource=self.datasource_name)
            if connection is not None:
                self._close_connection(connection)
            return

        self._engine = engine
        self._connection = connection
        self._data_factory = data_factory
        logger.info("data_source_bound", datasource=self.datasource_name)

    def _unregister(self) -> None:
        try:
            if self._data_factory is not None:
                self._data_factory.close()
            if self._connection is not None:
                self._close_connection(self._connection)
        finally:
            self._engine = None
            self._connection = None
            self._data_factory = None

    def _close_connection(self, connection: Connection) -> None:
        try:
            if not connection.closed:
                connection.close()
        except SQLAlchemyError:
            logger.exception("connection_close_failed", datasource=self.datasource_name)
