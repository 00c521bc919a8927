"""Expose relational database rows as a hierarchical resource tree."""

from .errors import (
    ConfigurationError,
    ProviderUnavailableError,
    ResourceProviderError,
    RowMappingError,
    SchemaInitializationError,
    StorageUnavailableError,
)
from .facade import ResourceDataFactory
from .factory import ResourceProviderFactory
from .provider import ResourceProvider
from .resources import RecordResourceData, ResourceData, TableResourceData

__all__ = [
    "ConfigurationError",
    "ProviderUnavailableError",
    "RecordResourceData",
    "ResourceData",
    "ResourceDataFactory",
    "ResourceProvider",
    "ResourceProviderError",
    "ResourceProviderFactory",
    "RowMappingError",
    "SchemaInitializationError",
    "StorageUnavailableError",
    "TableResourceData",
]
