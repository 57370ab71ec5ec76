"""SQLAlchemy datastore storing field values as rows of the field_meta table."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from cms_fields.datastore.base import Datastore
from cms_fields.fields.transcoder import StorageRow
from cms_fields.models.field_meta import FieldMeta

logger = logging.getLogger(__name__)


class MetaDatastore(Datastore):
    """
    Datastore bound to one content object.

    Every write is committed immediately unless it happens inside ``batch()``,
    in which case the outermost batch commits once, or rolls back and
    re-raises when any write fails.
    """

    def __init__(self, session: Session, object_type: str = "post", object_id: int = 0) -> None:
        self.session = session
        self.object_type = object_type
        self.object_id = object_id
        self._batch_depth = 0

    def __repr__(self) -> str:
        return f"<MetaDatastore {self.object_type}:{self.object_id}>"

    def _owner_clause(self):
        return (FieldMeta.object_type == self.object_type) & (FieldMeta.object_id == self.object_id)

    def _commit(self) -> None:
        if self._batch_depth == 0:
            self.session.commit()

    @contextlib.contextmanager
    def batch(self) -> Iterator[MetaDatastore]:
        self._batch_depth += 1
        try:
            yield self
        except Exception:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                logger.warning("Rolling back field_meta batch for %s:%s", self.object_type, self.object_id)
                self.session.rollback()
            raise
        else:
            self._batch_depth -= 1
            self._commit()

    # ── Storage primitives ────────────────────────────────────────────────────

    def _read(self, key: str) -> str | None:
        result = self.session.execute(
            select(FieldMeta.meta_value).where(self._owner_clause(), FieldMeta.meta_key == key)
        )
        return result.scalar_one_or_none()

    def _write(self, key: str, value: str) -> None:
        result = self.session.execute(select(FieldMeta).where(self._owner_clause(), FieldMeta.meta_key == key))
        row = result.scalar_one_or_none()
        if row is None:
            self.session.add(
                FieldMeta(object_type=self.object_type, object_id=self.object_id, meta_key=key, meta_value=value)
            )
        else:
            row.meta_value = value
        self.session.flush()
        self._commit()

    def _remove(self, key: str) -> None:
        self.session.execute(delete(FieldMeta).where(self._owner_clause(), FieldMeta.meta_key == key))
        self._commit()

    def _scan(self, prefix: str) -> list[StorageRow]:
        result = self.session.execute(
            select(FieldMeta.meta_key, FieldMeta.meta_value)
            .where(self._owner_clause(), FieldMeta.meta_key.startswith(prefix, autoescape=True))
            .order_by(FieldMeta.id)
        )
        return [StorageRow(key, value) for key, value in result.all()]

    def _remove_many(self, keys: list[str]) -> None:
        if keys:
            self.session.execute(delete(FieldMeta).where(self._owner_clause(), FieldMeta.meta_key.in_(keys)))
        self._commit()
