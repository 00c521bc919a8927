"""Resource provider - the generic tree API over a resource data factory."""

from collections.abc import Iterator, Mapping
from typing import Any

from .facade import ResourceDataFactory
from .resources import RecordResourceData, ResourceData


class ResourceProvider:
    """Read and write resources by path."""

    def __init__(self, data_factory: ResourceDataFactory):
        self.data_factory = data_factory
        self._closed = False

    def get_resource(self, path: str) -> ResourceData | None:
        return self.data_factory.get(path)

    def list_children(self, path: str) -> Iterator[ResourceData]:
        """Yield the child resources of path; children that vanish are skipped."""
        for child_path in self.data_factory.list_children(path):
            child = self.data_factory.get(child_path)
            if child is not None:
                yield child

    def create(self, path: str, properties: Mapping[str, Any]) -> ResourceData | None:
        """Create or overwrite the record at path.

        Returns the stored record, or None when nothing was written.
        """
        stored = self.data_factory.put(
            path, RecordResourceData(path=path, properties=dict(properties))
        )
        if stored is None:
            return None
        return RecordResourceData(path=path, properties=stored)

    def delete(self, path: str) -> bool:
        """Delete the record at path; False when the deletion was not applied."""
        return self.data_factory.put(path, None) is not None

    def is_live(self) -> bool:
        return not self._closed and self.data_factory.is_live()

    def close(self) -> None:
        """Close this provider only; the data factory belongs to its owner."""
        self._closed = True
