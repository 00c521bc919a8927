"""Resource values handed to and returned from the resource tree."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from .mapping import PropertyValue


class ResourceData(BaseModel):
    """A node in the resource tree: its path plus a property map."""

    path: str
    properties: dict[str, PropertyValue] = Field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Property value, or default when it is missing or null."""
        value = self.properties.get(name)
        return default if value is None else value


class TableResourceData(ResourceData):
    """Table-level node. Has no storage of its own; its children are rows."""

    kind: Literal["table"] = "table"


class RecordResourceData(ResourceData):
    """Row-level node carrying the row's fields."""

    kind: Literal["record"] = "record"
