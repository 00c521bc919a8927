"""Exception hierarchy for the resource provider."""


class ResourceProviderError(Exception):
    """Base class for all resource provider errors."""

    pass


class ConfigurationError(ResourceProviderError):
    """Raised when a required setup parameter is missing."""

    pass


class SchemaInitializationError(ResourceProviderError):
    """Raised when the backing table cannot be created."""

    pass


class StorageUnavailableError(ResourceProviderError):
    """Raised in strict mode when the database could not be queried."""

    def __init__(self, operation: str, path: str):
        super().__init__(f"Storage failure during {operation} for {path}")
        self.operation = operation
        self.path = path


class ProviderUnavailableError(ResourceProviderError):
    """Raised when a provider is requested while no data source is bound."""

    pass


class RowMappingError(ResourceProviderError, ValueError):
    """Raised when a property value cannot be converted to its column type."""

    pass
