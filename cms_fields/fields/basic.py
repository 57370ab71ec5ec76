"""Plain field types: text, textarea, select and map."""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from cms_fields.fields.base import Field
from cms_fields.fields.transcoder import maybe_unserialize


class TextField(Field):
    """Single line text input."""

    type = "text"

    def set_value(self, value: Any) -> None:
        if value is not None and not isinstance(value, str):
            value = str(value)
        self.value = value

    def unserialize(self, stored: Any) -> Any:
        return stored


class TextareaField(TextField):
    """Multi line text input."""

    type = "textarea"

    def __init__(self, name: str, label: str | None = None) -> None:
        super().__init__(name, label)
        self.rows = 5

    def set_rows(self, rows: int) -> TextareaField:
        self.rows = max(int(rows), 1)
        return self

    def to_json(self, load: bool) -> dict[str, Any]:
        data = super().to_json(load)
        data["rows"] = self.rows
        return data


class SelectField(TextField):
    """Single choice out of a list of options."""

    type = "select"

    def __init__(self, name: str, label: str | None = None) -> None:
        super().__init__(name, label)
        self._options: list[Any] = []

    def add_options(self, options: list[Any] | Mapping[Any, Any] | Callable[[], Any]) -> SelectField:
        """
        Append options to the field.

        Accepts a list (each item is both value and label), a mapping of
        value to label, or a callable returning either; callables are resolved
        when the options are read.
        """
        self._options.append(options)
        return self

    @property
    def options(self) -> list[dict[str, str]]:
        resolved = []
        for source in self._options:
            if callable(source):
                source = source()
            if isinstance(source, Mapping):
                resolved.extend({"value": str(value), "label": str(label)} for value, label in source.items())
            else:
                resolved.extend({"value": str(value), "label": str(value)} for value in source)
        return resolved

    def to_json(self, load: bool) -> dict[str, Any]:
        data = super().to_json(load)
        data["options"] = self.options
        return data


class MapField(Field):
    """
    Map location stored as a compound value.

    The value is a mapping with the keys of ``SUB_KEYS``. Each sub-key is
    persisted as its own row named ``{name}_{sub}``.
    """

    type = "map"
    SUB_KEYS = ("lat", "lng", "zoom", "address")

    def __init__(self, name: str, label: str | None = None) -> None:
        super().__init__(name, label)
        self.default_value = {key: "" for key in self.SUB_KEYS}
        self.value = copy.deepcopy(self.default_value)

    def set_position(self, lat: float, lng: float, zoom: int) -> MapField:
        return self.set_default_value({"lat": str(lat), "lng": str(lng), "zoom": str(zoom), "address": ""})

    def set_value(self, value: Any) -> None:
        value = maybe_unserialize(value)
        if not isinstance(value, Mapping):
            value = {}
        self.value = {key: "" if value.get(key) is None else str(value.get(key)) for key in self.SUB_KEYS}

    def storage_keys(self) -> list[str]:
        return [f"{self.name}_{key}" for key in self.SUB_KEYS]

    def storage_items(self) -> list[tuple[str, str]]:
        value = self.value or {}
        return [(f"{self.name}_{key}", str(value.get(key, ""))) for key in self.SUB_KEYS]

    def set_value_from_storage(self, raw: Mapping[str, Any]) -> None:
        # complex field rows arrive already gathered under the field name
        stored = raw.get(self.name)
        if stored is None:
            stored = {key: raw.get(f"{self.name}_{key}") for key in self.SUB_KEYS}
            if all(item is None for item in stored.values()):
                return
        self.set_value(stored)
