"""In-memory datastore, used for previews and tests."""

from __future__ import annotations

from cms_fields.datastore.base import Datastore
from cms_fields.fields.transcoder import StorageRow


class MemoryDatastore(Datastore):
    """Datastore keeping rows in a plain dict; writes are not transactional."""

    def __init__(self, rows: dict[str, str] | None = None) -> None:
        self.rows: dict[str, str] = dict(rows or {})

    def _read(self, key: str) -> str | None:
        return self.rows.get(key)

    def _write(self, key: str, value: str) -> None:
        self.rows[key] = value

    def _remove(self, key: str) -> None:
        self.rows.pop(key, None)

    def _scan(self, prefix: str) -> list[StorageRow]:
        return [StorageRow(key, value) for key, value in self.rows.items() if key.startswith(prefix)]

    def _remove_many(self, keys: list[str]) -> None:
        for key in keys:
            self.rows.pop(key, None)
