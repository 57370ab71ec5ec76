"""
Complex field: a repeater of heterogeneous field groups.

The value of a complex field is an ordered list of group instances. Each
instance is created from one of the registered groups and holds freshly
spawned sub-field instances whose storage names embed the complex field name,
the group name, the sub-field name and the row index.

Two storage encodings are supported:

- ``multiple_fields``: every sub-field is its own storage row.
- ``single_field``: the whole value is one serialized nested structure.

Both are read back through ``process_loaded_values``.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.base import Field
from cms_fields.fields.group import GroupField
from cms_fields.fields.keys import build_field_name, parse_field_key
from cms_fields.fields.transcoder import (
    GROUP_KEY,
    TYPE_KEY,
    StorageRow,
    decode,
    encode,
    maybe_unserialize,
    strip_slashes_deep,
)

logger = logging.getLogger(__name__)


class Layout(str, enum.Enum):
    """Presentation of the complex field rows in the admin UI."""

    TABLE = "table"
    LIST = "list"


class SaveMode(str, enum.Enum):
    """Physical storage encoding of a complex field value."""

    MULTIPLE_FIELDS = "multiple_fields"
    SINGLE_FIELD = "single_field"


class GroupInstance:
    """One repeater row: the group it was created from and its live sub-fields."""

    def __init__(self, type: str, fields: list[Field]) -> None:
        self.type = type
        self.fields = fields

    def __repr__(self) -> str:
        return f"<GroupInstance {self.type!r} {self.fields!r}>"

    def get_field(self, base_name: str) -> Field | None:
        for field in self.fields:
            if field.base_name == base_name:
                return field
        return None

    def as_dict(self) -> dict[str, Any]:
        """Map each sub-field's defined name to its value."""
        return {
            field.base_name: field.to_tree() if isinstance(field, ComplexField) else field.value
            for field in self.fields
        }

    def as_record(self) -> dict[str, Any]:
        return {TYPE_KEY: self.type, **self.as_dict()}


class ComplexField(Field):
    """Repeater field whose entries are typed groups of sub-fields."""

    type = "complex"

    def __init__(self, name: str, label: str | None = None) -> None:
        super().__init__(name, label)
        self.default_value = None
        self.value = None
        self.values: list[GroupInstance] = []
        self.groups: dict[str, GroupField] = {}
        self.layout = Layout.TABLE
        self.values_min = -1
        self.values_max = -1
        self.save_mode = SaveMode.MULTIPLE_FIELDS
        self.labels = {
            "singular_name": "Entry",
            "plural_name": "Entries",
        }

    # ── Definition ────────────────────────────────────────────────────────────

    def add_group(self, name: str, label: str | None, fields: Iterable[Field]) -> ComplexField:
        """Register a named group of fields."""
        return self._register_group(GroupField(name, label, fields))

    def add_unnamed_group(self, fields: Iterable[Field]) -> ComplexField:
        """Register the single group of a complex field that needs no group names."""
        return self._register_group(GroupField("", None, fields))

    def _register_group(self, group: GroupField) -> ComplexField:
        if group.name in self.groups:
            raise ConfigurationError(
                f'Group with name "{group.name}" in Complex Field "{self.label}" already exists.',
                details={"field": self.name, "group": group.name},
            )
        self.groups[group.name] = group
        return self

    def set_header_template(self, template: str | Callable[[], str]) -> ComplexField:
        """Set the entry label template of the most recently added group."""
        if not self.groups:
            raise ConfigurationError(
                f"Can't set group label template. There are no present groups for Complex Field {self.label}.",
                details={"field": self.name},
            )

        if callable(template):
            template = template()

        group = list(self.groups.values())[-1]
        group.set_label_template(template)
        return self

    def setup_labels(self, labels: Mapping[str, str]) -> ComplexField:
        """Override ``singular_name`` and/or ``plural_name``."""
        self.labels = {**self.labels, **labels}
        return self

    def set_layout(self, layout: str | Layout) -> ComplexField:
        try:
            self.layout = Layout(layout)
        except ValueError as e:
            raise ConfigurationError(
                f'Incorrect layout specifier "{layout}". Available values are "table" and "list"',
                details={"field": self.name},
            ) from e
        return self

    def set_save_mode(self, save_mode: str | SaveMode) -> ComplexField:
        try:
            self.save_mode = SaveMode(save_mode)
        except ValueError as e:
            raise ConfigurationError(
                f'Incorrect save mode "{save_mode}". Available values are "multiple_fields" and "single_field"',
                details={"field": self.name},
            ) from e
        return self

    def set_min(self, min: int) -> ComplexField:
        self.values_min = int(min)
        return self

    def get_min(self) -> int:
        return self.values_min

    def set_max(self, max: int) -> ComplexField:
        self.values_max = int(max)
        return self

    def get_max(self) -> int:
        return self.values_max

    def get_group_names(self) -> list[str]:
        return list(self.groups)

    def get_group_by_name(self, group_name: str) -> GroupField | None:
        return self.groups.get(group_name)

    def get_fields(self) -> list[Field]:
        """All field definitions of all groups, in registration order."""
        return [field for group in self.groups.values() for field in group.fields]

    # ── Instances ─────────────────────────────────────────────────────────────

    def set_datastore(self, datastore) -> ComplexField:
        self.datastore = datastore
        for instance in self.values:
            for field in instance.fields:
                field.set_datastore(datastore)
        return self

    def spawn(self) -> ComplexField:
        instance = super().spawn()
        instance.values = []
        return instance

    def rename(self, name: str) -> None:
        """Rename the field and every sub-field instance it holds."""
        super().rename(name)
        for position, instance in enumerate(self.values):
            for field in instance.fields:
                field.rename(build_field_name(name, instance.type, field.base_name, position))

    def _spawn_field(self, template: Field) -> Field:
        instance = template.spawn()
        instance.set_datastore(self.datastore)
        # rows decoded from a single blob always arrive in the multi-row shape
        if isinstance(instance, ComplexField) and self.save_mode is SaveMode.SINGLE_FIELD:
            instance.save_mode = SaveMode.MULTIPLE_FIELDS
        return instance

    def get_values(self) -> list[GroupInstance]:
        return self.values

    def to_tree(self) -> list[dict[str, Any]]:
        """Return the current value as a list of ``_type`` tagged records."""
        return [instance.as_record() for instance in self.values]

    # ── Input binding ─────────────────────────────────────────────────────────

    def set_value_from_input(self, input: Mapping[str, Any]) -> None:
        """
        Bind the submitted entries found under this field's name.

        In single_field mode the submitted structure is unescaped, encoded and
        kept as the field value. Otherwise every entry naming a registered
        group becomes a group instance; other entries are skipped.
        """
        if self.name not in input:
            return

        self.values = []
        input_groups = input[self.name]

        if self.save_mode is SaveMode.SINGLE_FIELD:
            self.set_value(encode(strip_slashes_deep(input_groups)))
            return

        if isinstance(input_groups, Mapping):
            entries = list(input_groups.values())
        elif isinstance(input_groups, list):
            entries = input_groups
        else:
            entries = []

        index = 0
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue

            group_name = entry.get(GROUP_KEY)
            group = self.groups.get(group_name) if isinstance(group_name, str) else None
            if group is None:
                logger.debug("Skipping entry of %s with unknown group %r", self.name, group_name)
                continue

            # trim input values to those used by the group
            group_field_names = group.field_names()
            values = {key: value for key, value in entry.items() if key in group_field_names}

            value_group = []
            for template in group.fields:
                instance = self._spawn_field(template)
                new_name = build_field_name(self.name, group.name, template.name, index)

                if isinstance(instance, ComplexField):
                    if template.name not in values:
                        continue
                    instance.rename(new_name)
                    instance.set_value_from_input({new_name: values[template.name]})
                else:
                    instance.set_value_from_input(values)

                instance.rename(new_name)
                value_group.append(instance)

            self.values.append(GroupInstance(group.name, value_group))
            index += 1

    # ── Loading ───────────────────────────────────────────────────────────────

    def load(self) -> None:
        self.load_values()

    def load_values(self) -> None:
        """Read the stored value in either encoding and rebuild the group instances."""
        store = self._require_datastore()

        if self.save_mode is SaveMode.SINGLE_FIELD:
            previous = self.value
            store.load(self)
            data = maybe_unserialize(self.value)
            if isinstance(data, list):
                self.value = data
                rows = decode(data, self.name)
            else:
                self.value = previous
                rows = []
            self.process_loaded_values(rows)
            return

        self.process_loaded_values(store.load_values(self))

    def load_values_from_array(self, values: Mapping[str, Any]) -> None:
        """
        Rebuild the group instances from an already parsed mapping of keys to values.

        Used for nested complex fields, which receive the entries of the parent
        row whose keys start with their name.
        """
        if self.save_mode is SaveMode.SINGLE_FIELD:
            data = maybe_unserialize(values.get(self.name))
            self.value = data if isinstance(data, list) else None
            self.process_loaded_values(decode(data, self.name) if isinstance(data, list) else [])
            return

        legacy_prefix = re.compile("^(" + re.escape(self.name) + r")_\d+_")
        rows = [
            StorageRow(legacy_prefix.sub(r"\1_", key), value)
            for key, value in values.items()
            if key.startswith(self.name)
        ]
        self.process_loaded_values(rows)

    def process_loaded_values(self, group_rows: Iterable[StorageRow]) -> None:
        """
        Parse raw storage rows into group instances.

        Rows whose key does not match the storage key grammar, or whose group
        is no longer registered, are dropped.
        """
        self.values = []

        # Set default values
        field_names: list[str] = []
        for group in self.groups.values():
            for template in group.fields:
                if template.name not in field_names:
                    field_names.append(template.name)
                template.set_value(template.spawn().value)

        group_rows = list(group_rows or [])
        if not group_rows:
            return

        group_names = list(self.groups)
        input_groups: dict[int, dict[str, Any]] = {}

        for row in group_rows:
            parts = parse_field_key(row.field_key, self.name, group_names, field_names)
            if parts is None:
                logger.debug("Ignoring row %r not matching complex field %s", row.field_key, self.name)
                continue

            field_value = row.field_value
            bucket = input_groups.setdefault(parts.index, {"type": parts.group, "values": {}})
            bucket["type"] = parts.group
            values = bucket["values"]

            if parts.trailing:
                values[f"{parts.key}_{parts.sub or ''}-{parts.trailing}"] = field_value
            elif parts.sub:
                compound = values.get(parts.key)
                if not isinstance(compound, dict):
                    compound = values[parts.key] = {}
                compound[parts.sub] = field_value
            else:
                values[parts.key] = field_value

        # storage order is not read order
        for index in sorted(input_groups):
            bucket = input_groups[index]
            group = self.groups.get(bucket["type"])
            if group is None:
                logger.debug("Dropping row %s of %s: group %r is not registered", index, self.name, bucket["type"])
                continue

            position = len(self.values)
            value_group = []
            for template in group.fields:
                instance = self._spawn_field(template)

                if isinstance(instance, ComplexField):
                    instance.load_values_from_array(bucket["values"])
                else:
                    instance.set_value_from_storage(bucket["values"])

                instance.rename(build_field_name(self.name, group.name, template.name, position))
                value_group.append(instance)

            self.values.append(GroupInstance(group.name, value_group))

    # ── Saving ────────────────────────────────────────────────────────────────

    def save(self) -> None:
        """
        Persist the current value.

        In multi-row mode every stored row of this field is deleted before the
        sub-fields are written again, inside one datastore batch.
        """
        store = self._require_datastore()

        if self.save_mode is SaveMode.SINGLE_FIELD:
            if self.value is not None:
                store.save(self)
            else:
                self.delete()
            return

        with store.batch():
            self.delete()
            for instance in self.values:
                for field in instance.fields:
                    field.save()

    def delete(self) -> None:
        store = self._require_datastore()

        if self.save_mode is SaveMode.SINGLE_FIELD:
            store.delete(self)
        else:
            store.delete_values(self)

    # ── Presentation ──────────────────────────────────────────────────────────

    def to_json(self, load: bool) -> dict[str, Any]:
        complex_data = super().to_json(load)

        values_data = []
        for instance in self.values:
            group = self.get_group_by_name(instance.type)
            values_data.append(
                {
                    "name": group.name,
                    "label": group.label,
                    "group_id": group.group_id,
                    "fields": [field.to_json(False) for field in instance.fields],
                }
            )

        complex_data.update(
            {
                "layout": self.layout.value,
                "labels": dict(self.labels),
                "min": self.get_min(),
                "max": self.get_max(),
                "save_mode": self.save_mode.value,
                "multiple_groups": len(self.groups) > 1,
                "groups": [group.to_json() for group in self.groups.values()],
                "value": values_data,
            }
        )
        return complex_data
