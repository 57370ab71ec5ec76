"""
Datastore Base Class

Datastore: abstract key/value storage that fields persist themselves to.

Subclasses implement five primitives over an opaque storage medium
(``_read``, ``_write``, ``_remove``, ``_scan``, ``_remove_many``); the field
facing operations (load, save, delete, load_values, delete_values) are
built on top of them here.
"""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

from cms_fields.fields.keys import owns_storage_key
from cms_fields.fields.transcoder import StorageRow

if TYPE_CHECKING:
    from cms_fields.fields.base import Field
    from cms_fields.fields.complex import ComplexField


class Datastore(ABC):
    """
    Abstract base class for all datastores.

    Errors raised by the storage medium propagate to the caller unchanged.
    """

    # ── Storage primitives ────────────────────────────────────────────────────

    @abstractmethod
    def _read(self, key: str) -> str | None:
        """Return the stored text for ``key``, or None when absent."""

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        """Insert or replace the row ``key``."""

    @abstractmethod
    def _remove(self, key: str) -> None:
        """Remove the row ``key`` if present."""

    @abstractmethod
    def _scan(self, prefix: str) -> list[StorageRow]:
        """Return every row whose key starts with ``prefix``."""

    @abstractmethod
    def _remove_many(self, keys: list[str]) -> None:
        """Remove all rows in ``keys``."""

    @contextlib.contextmanager
    def batch(self) -> Iterator[Datastore]:  # noqa: B027
        """
        Group several writes into one unit.

        The default implementation offers no atomicity: writes happen as
        they are issued. Transactional datastores override this.
        """
        yield self

    # ── Field operations ──────────────────────────────────────────────────────

    def load(self, field: Field) -> None:
        field.set_value_from_storage({key: self._read(key) for key in field.storage_keys()})

    def save(self, field: Field) -> None:
        for key, value in field.storage_items():
            self._write(key, value)

    def delete(self, field: Field) -> None:
        for key in field.storage_keys():
            self._remove(key)

    def load_values(self, field: ComplexField) -> list[StorageRow]:
        """Return the rows written by the complex field ``field`` for its registered groups."""
        group_names = field.get_group_names()
        return [row for row in self._scan(field.name) if owns_storage_key(field.name, row.field_key, group_names)]

    def delete_values(self, field: ComplexField) -> None:
        """Remove every row written by the complex field ``field``."""
        self._remove_many([row.field_key for row in self.load_values(field)])
