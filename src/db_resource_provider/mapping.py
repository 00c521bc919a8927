"""Conversion between SQL result rows and property maps."""

from collections.abc import Mapping
from typing import Any

from .errors import RowMappingError
from .tables import TableDescriptor, whole_number

PropertyValue = str | int | None
PropertyMap = dict[str, PropertyValue]


def row_to_properties(descriptor: TableDescriptor, row: Mapping[str, Any] | None) -> PropertyMap:
    """Map a result row to a property map keyed by lowercase property name.

    Returns an empty map when there is no row; callers tell a miss by emptiness.
    """
    if row is None:
        return {}

    properties: PropertyMap = {}
    for column in descriptor.columns:
        value = row[column.name]
        if value is not None:
            value = column.coerce(value)
        elif column.coerce is whole_number:
            # NULL integers read as zero
            value = 0
        properties[column.prop] = value
    return properties


def properties_to_parameters(
    descriptor: TableDescriptor, row_key: str, properties: Mapping[str, Any]
) -> dict[str, Any]:
    """Build insert/update parameters in column order, applying defaults.

    The key column always takes row_key, whatever the properties say.

    Raises:
        RowMappingError: If a value cannot be coerced to its column type.
    """
    parameters: dict[str, Any] = {descriptor.key.name: row_key}
    for column in descriptor.value_columns:
        value = properties.get(column.prop)
        if value is None:
            value = column.default
        try:
            parameters[column.name] = column.coerce(value)
        except (TypeError, ValueError) as e:
            raise RowMappingError(
                f"Invalid value for {column.prop}: {value!r}"
            ) from e
    return parameters
