"""
Field base class.

A Field is a definition (name, label, default value, help text) that can
spawn independent live instances carrying a value. Instances persist
themselves through the datastore they are bound to.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.transcoder import maybe_unserialize, serialize_value
from cms_fields.utils.naming import humanize_name, normalize_name

if TYPE_CHECKING:
    from cms_fields.datastore.base import Datastore


class Field:
    """Base class for every field type."""

    type = "field"

    def __init__(self, name: str, label: str | None = None) -> None:
        normalized = normalize_name(name)
        if not normalized:
            raise ConfigurationError(f"Field name '{name}' is invalid", details={"field": name})

        self.id = f"cf-{uuid.uuid4().hex[:12]}"
        self.name = normalized
        self.base_name = normalized
        self.label = label if label is not None else humanize_name(normalized)
        self.default_value: Any = ""
        self.value: Any = ""
        self.help_text: str | None = None
        self.required = False
        self.datastore: Datastore | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}={self.value!r}>"

    # ── Definition ────────────────────────────────────────────────────────────

    def set_default_value(self, value: Any) -> Field:
        self.default_value = value
        self.value = copy.deepcopy(value)
        return self

    def set_help_text(self, text: str) -> Field:
        self.help_text = text
        return self

    def set_required(self, required: bool = True) -> Field:
        self.required = required
        return self

    def set_datastore(self, datastore: Datastore | None) -> Field:
        self.datastore = datastore
        return self

    def spawn(self) -> Field:
        """Return an independent instance of this definition holding its default value."""
        instance = copy.copy(self)
        instance.value = copy.deepcopy(self.default_value)
        return instance

    def rename(self, name: str) -> None:
        """Rewrite the storage name; ``base_name`` keeps the defined name."""
        self.name = name

    # ── Value ─────────────────────────────────────────────────────────────────

    def set_value(self, value: Any) -> None:
        self.value = value

    def get_value(self) -> Any:
        return self.value

    def set_value_from_input(self, input: Mapping[str, Any]) -> None:
        """Take the value submitted under this field's name, if any."""
        if self.name in input:
            self.set_value(input[self.name])

    # ── Persistence ───────────────────────────────────────────────────────────

    def storage_keys(self) -> list[str]:
        return [self.name]

    def storage_items(self) -> list[tuple[str, str]]:
        """Return the ``(key, text)`` rows that persist the current value."""
        value = self.value
        if isinstance(value, (list, dict)):
            value = serialize_value(value)
        elif value is None:
            value = ""
        return [(self.name, str(value))]

    def unserialize(self, stored: Any) -> Any:
        """Turn stored text back into a value; structured values come back parsed."""
        return maybe_unserialize(stored)

    def set_value_from_storage(self, raw: Mapping[str, Any]) -> None:
        stored = raw.get(self.name)
        if stored is not None:
            self.set_value(self.unserialize(stored))

    def _require_datastore(self) -> Datastore:
        if self.datastore is None:
            raise ConfigurationError(f"Field '{self.name}' has no datastore", details={"field": self.name})
        return self.datastore

    def load(self) -> None:
        self._require_datastore().load(self)

    def save(self) -> None:
        self._require_datastore().save(self)

    def delete(self) -> None:
        self._require_datastore().delete(self)

    # ── Presentation ──────────────────────────────────────────────────────────

    def to_json(self, load: bool) -> dict[str, Any]:
        """
        Return the field data consumed by the admin UI.

        Args:
            load: Load the value from the datastore first instead of using the
                  value held by this instance.
        """
        if load:
            self.load()

        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "base_name": self.base_name,
            "label": self.label,
            "value": self.value,
            "default_value": self.default_value,
            "help_text": self.help_text,
            "required": self.required,
        }
