"""
Containers: named sets of fields attached to a kind of content object.

A registered container is a definition. Requests work on ``spawn(datastore)``
copies whose fields are fresh instances bound to a request-scoped datastore.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from cms_fields.datastore.base import Datastore
from cms_fields.datastore.meta import MetaDatastore
from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.base import Field
from cms_fields.utils.naming import normalize_name

logger = logging.getLogger(__name__)


class Container:
    """Base container; stores its values in metadata of one object type."""

    type = "container"
    object_type = "post"

    def __init__(self, title: str, id: str | None = None) -> None:
        self.title = title
        self.id = normalize_name(id or title)
        if not self.id:
            raise ConfigurationError(f"Container title '{title}' is invalid")
        self.fields: list[Field] = []
        self.datastore: Datastore | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id!r}>"

    # ── Definition ────────────────────────────────────────────────────────────

    def add_fields(self, fields: Iterable[Field]) -> Container:
        """Append fields; field names must be unique within the container."""
        registered = {field.name for field in self.fields}
        for field in fields:
            if not isinstance(field, Field):
                raise ConfigurationError(
                    f"Object of type '{type(field).__name__}' in container '{self.id}' is not a field",
                    details={"container": self.id},
                )
            if field.name in registered:
                raise ConfigurationError(
                    f'Field name "{field.name}" already registered',
                    details={"container": self.id, "field": field.name},
                )
            registered.add(field.name)
            field.set_datastore(self.datastore)
            self.fields.append(field)
        return self

    def get_field(self, name: str) -> Field | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def settings_json(self) -> dict[str, Any]:
        return {}

    # ── Request scope ─────────────────────────────────────────────────────────

    def set_datastore(self, datastore: Datastore | None) -> Container:
        self.datastore = datastore
        for field in self.fields:
            field.set_datastore(datastore)
        return self

    def datastore_for(self, session: Session, object_id: int) -> Datastore:
        return MetaDatastore(session, object_type=self.object_type, object_id=object_id)

    def spawn(self, datastore: Datastore) -> Container:
        """Return a copy with fresh field instances bound to ``datastore``."""
        instance = copy.copy(self)
        instance.fields = [field.spawn() for field in self.fields]
        instance.set_datastore(datastore)
        return instance

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def _require_datastore(self) -> Datastore:
        if self.datastore is None:
            raise ConfigurationError(f"Container '{self.id}' has no datastore", details={"container": self.id})
        return self.datastore

    def load(self) -> None:
        for field in self.fields:
            field.load()

    def save(self, input: Mapping[str, Any]) -> None:
        """Bind every field from ``input`` and persist it in one datastore batch."""
        store = self._require_datastore()
        with store.batch():
            for field in self.fields:
                field.set_value_from_input(input)
                field.save()
        logger.info("Saved container %s (%d fields) to %r", self.id, len(self.fields), store)

    def delete(self) -> None:
        store = self._require_datastore()
        with store.batch():
            for field in self.fields:
                field.delete()
        logger.info("Deleted values of container %s from %r", self.id, store)

    def to_json(self, load: bool) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "settings": self.settings_json(),
            "fields": [field.to_json(load) for field in self.fields],
        }


class PostMetaContainer(Container):
    """Fields stored per content object."""

    type = "post_meta"
    object_type = "post"

    def __init__(self, title: str, id: str | None = None, post_types: Iterable[str] = ("post",)) -> None:
        super().__init__(title, id)
        self.post_types = list(post_types)

    def show_on_post_type(self, post_types: str | Iterable[str]) -> PostMetaContainer:
        self.post_types = [post_types] if isinstance(post_types, str) else list(post_types)
        return self

    def settings_json(self) -> dict[str, Any]:
        return {"post_types": list(self.post_types)}
