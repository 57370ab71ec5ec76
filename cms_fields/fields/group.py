"""Field groups: the named variants a complex field entry can take."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.base import Field
from cms_fields.utils.naming import humanize_name, normalize_name


class GroupField:
    """
    A named, labeled, ordered collection of field definitions.

    The fields held here are templates: complex fields spawn instances from
    them and never bind values onto them.
    """

    def __init__(self, name: str, label: str | None, fields: Iterable[Field]) -> None:
        self.name = normalize_name(name)
        self.label = label if label is not None else humanize_name(self.name)
        self.group_id = f"cf-group-{uuid.uuid4().hex[:12]}"
        self.label_template: str | None = None
        self._fields: dict[str, Field] = {}

        for field in fields:
            self._add_field(field)

    def __repr__(self) -> str:
        return f"<GroupField {self.name!r} fields={self.field_names()}>"

    def _add_field(self, field: Field) -> None:
        if not isinstance(field, Field):
            raise ConfigurationError(
                f"Object of type '{type(field).__name__}' in group '{self.name}' is not a field",
                details={"group": self.name},
            )
        if field.name in self._fields:
            raise ConfigurationError(
                f"Field name '{field.name}' already registered in group '{self.name}'",
                details={"group": self.name, "field": field.name},
            )
        self._fields[field.name] = field

    @property
    def fields(self) -> list[Field]:
        return list(self._fields.values())

    def field_names(self) -> list[str]:
        return list(self._fields)

    def get_field(self, name: str) -> Field | None:
        return self._fields.get(name)

    def set_label_template(self, content: str) -> GroupField:
        self.label_template = content
        return self

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "group_id": self.group_id,
            "label_template": self.label_template,
            "fields": [field.to_json(False) for field in self.fields],
        }
