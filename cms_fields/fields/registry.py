"""
Field type registry.

FieldTypeRegistry maps type slugs ("text", "complex", ...) to Field classes
so definitions can be built with ``make_field("text", "title")``.
"""

from __future__ import annotations

import logging

from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.base import Field
from cms_fields.fields.basic import MapField, SelectField, TextareaField, TextField
from cms_fields.fields.complex import ComplexField

logger = logging.getLogger(__name__)


class FieldTypeRegistry:
    """In-process registry of the available field types."""

    def __init__(self) -> None:
        self._types: dict[str, type[Field]] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, field_class: type[Field]) -> None:
        """Register a Field subclass under its ``type`` slug."""
        if not (isinstance(field_class, type) and issubclass(field_class, Field)):
            raise ConfigurationError(f"{field_class!r} is not a Field subclass")
        self._types[field_class.type] = field_class
        logger.debug("Field type registered: %s", field_class.type)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, type_name: str) -> type[Field] | None:
        return self._types.get(type_name)

    def all_types(self) -> list[str]:
        return list(self._types)

    def is_registered(self, type_name: str) -> bool:
        return type_name in self._types

    # ── Factory ───────────────────────────────────────────────────────────────

    def make(self, type_name: str, name: str, label: str | None = None) -> Field:
        field_class = self.get(type_name)
        if field_class is None:
            raise ConfigurationError(
                f'Unknown field type "{type_name}"',
                details={"type": type_name, "available": self.all_types()},
            )
        return field_class(name, label)


# ── Global singleton ──────────────────────────────────────────────────────────
field_types = FieldTypeRegistry()

for _field_class in (TextField, TextareaField, SelectField, MapField, ComplexField):
    field_types.register(_field_class)


def make_field(type_name: str, name: str, label: str | None = None) -> Field:
    """Build a field definition of a registered type."""
    return field_types.make(type_name, name, label)
