"""
Flat/nested transcoder for complex field values.

Single-field complex values are stored as one nested structure: a list of
group records, each a mapping of field name to value tagged with a ``_type``
discriminator. Submitted input uses ``group`` as the discriminator and marks
every field key with a leading ``_``.

- ``encode`` turns submitted input into the stored shape.
- ``decode`` flattens the stored shape into the same ``StorageRow`` list that
  multi-row storage yields, so one reassembly routine serves both encodings.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from cms_fields.fields.keys import MARKER, build_field_name

TYPE_KEY = "_type"
GROUP_KEY = "group"


class StorageRow(NamedTuple):
    field_key: str
    field_value: Any


def serialize_value(value: Any) -> str:
    """Serialize a structured value into opaque storage text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def maybe_unserialize(value: Any) -> Any:
    """Inverse of serialize_value; anything that is not serialized text is returned as is."""
    if not isinstance(value, str) or value[:1] not in ("[", "{"):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def strip_slashes_deep(value: Any) -> Any:
    """Remove backslash escaping from every string in a nested structure."""
    if isinstance(value, str):
        return re.sub(r"\\(.?)", r"\1", value, flags=re.DOTALL)
    if isinstance(value, Mapping):
        return {key: strip_slashes_deep(item) for key, item in value.items()}
    if isinstance(value, list):
        return [strip_slashes_deep(item) for item in value]
    return value


def _is_record(item: Any, discriminator: str) -> bool:
    return isinstance(item, Mapping) and bool(item) and discriminator in item


def _rename_key(key: str) -> str:
    if key == GROUP_KEY:
        return TYPE_KEY
    if key.startswith(MARKER):
        return key[len(MARKER):]
    return key


def encode(data: Any) -> Any:
    """
    Convert submitted nested input into the stored shape (``db_save``).

    Records are mappings carrying a ``group`` key; their ``group`` key becomes
    ``_type`` and every other key loses one leading marker. Any list or mapping
    value is processed recursively. Items that are not records pass through.
    """
    if not data:
        return data

    if isinstance(data, Mapping):
        items = data.items()
    elif isinstance(data, list):
        items = enumerate(data)
    else:
        return data

    output: dict[Any, Any] = {}
    for index, item in items:
        if not _is_record(item, GROUP_KEY):
            output[index] = item
            continue

        record = {}
        for key, value in item.items():
            if isinstance(value, (list, Mapping)):
                value = encode(value)
            record[_rename_key(key)] = value
        output[index] = record

    if isinstance(data, list):
        return list(output.values())
    return output


def decode(data: Any, prefix: str) -> list[StorageRow]:
    """
    Flatten stored nested records into storage rows (``db_to_process``).

    Args:
        data:   List of records tagged with ``_type``.
        prefix: Storage name of the complex field that owns ``data``; nested
                record lists are decoded under the key of the field holding them.

    Returns:
        Rows keyed with the same grammar as multi-row storage.
    """
    if not data:
        return []

    if isinstance(data, Mapping):
        data = list(data.values())

    output: list[StorageRow] = []
    for index, item in enumerate(data):
        if not _is_record(item, TYPE_KEY):
            continue

        group = item[TYPE_KEY]
        for key, value in item.items():
            if key == TYPE_KEY:
                continue

            field_key = build_field_name(prefix, group, key, index)
            field_value = None

            if isinstance(value, (list, Mapping)):
                if isinstance(value, list) and value and _is_record(value[0], TYPE_KEY):
                    output.extend(decode(value, field_key))
                else:
                    field_value = serialize_value(value)
            elif value is not None:
                field_value = _stringify(value)

            if field_value is not None:
                output.append(StorageRow(field_key, field_value))

    return output


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)
