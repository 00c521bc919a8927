"""Supported tables and their column descriptors.

Tables are a closed enumeration; dispatch goes through ``SupportedTable.lookup``
and the descriptor attached to each member, so adding a table means adding a
member, a model and a descriptor entry.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import Column, Table

from .models import Account


def whole_number(value: Any) -> int:
    """Coerce to int, rejecting booleans and values with a fractional part."""
    if isinstance(value, bool):
        raise TypeError(f"{value!r} is not a whole number")
    if isinstance(value, str):
        return int(value)
    number = int(value)
    if number != value:
        raise ValueError(f"{value!r} is not a whole number")
    return number


@dataclass(frozen=True)
class ColumnSpec:
    """One column as seen from the property map side."""

    name: str  # SQL column name
    prop: str  # property map key
    coerce: Callable[[Any], Any]
    default: Any = None


@dataclass(frozen=True)
class TableDescriptor:
    """Everything the store and mapper need to know about a table."""

    name: str
    table: Table
    key: ColumnSpec
    columns: tuple[ColumnSpec, ...]

    @property
    def key_column(self) -> Column:
        return self.table.c[self.key.name]

    @property
    def value_columns(self) -> tuple[ColumnSpec, ...]:
        return tuple(c for c in self.columns if c is not self.key)


class SupportedTable(str, Enum):
    """Tables exposed as resources."""

    ACCOUNTS = "ACCOUNTS"

    @classmethod
    def lookup(cls, name: str) -> "SupportedTable | None":
        """Case-insensitive lookup; unknown names return None."""
        try:
            return cls(name.upper())
        except ValueError:
            return None

    @property
    def descriptor(self) -> TableDescriptor:
        return TABLE_DESCRIPTORS[self]


_ACCOUNT_KEY = ColumnSpec("USERID", "userid", str)

TABLE_DESCRIPTORS: dict[SupportedTable, TableDescriptor] = {
    SupportedTable.ACCOUNTS: TableDescriptor(
        name=SupportedTable.ACCOUNTS.value,
        table=Account.__table__,
        key=_ACCOUNT_KEY,
        columns=(
            _ACCOUNT_KEY,
            ColumnSpec("NAME", "name", str, default="[no name]"),
            ColumnSpec("EMAIL", "email", str, default="[no email]"),
            ColumnSpec("BALANCE", "balance", whole_number, default=0),
        ),
    ),
}
