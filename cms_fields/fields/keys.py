"""
Storage key grammar for complex field rows.

A sub-field of a complex field is persisted under a key of the form::

    {prefix}_{group}-_{field}_{index}[_{sub}][-{trailing}]

``sub`` carries the sub-key of compound values (``location_0_lat``) and
``trailing`` the remainder of a nested complex field's own key, which the
nested field decomposes again with its own prefix.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

MARKER = "_"


@dataclass(frozen=True)
class KeyParts:
    """The components recovered from one storage key."""

    group: str
    key: str
    index: int
    sub: str | None = None
    trailing: str | None = None


def build_field_name(prefix: str, group: str, field: str, index: int) -> str:
    """Return the storage name of ``field`` in row ``index`` of a complex field."""
    return f"{prefix}{MARKER}{group}-{MARKER}{field}_{index}"


@lru_cache(maxsize=256)
def _compile(prefix: str, group_names: tuple[str, ...], field_names: tuple[str, ...]) -> re.Pattern[str]:
    if group_names:
        group_regex = "(?P<group>" + "|".join(re.escape(name) for name in group_names) + ")"
    else:
        group_regex = r"(?P<group>\w*)"

    if field_names:
        field_regex = "(?P<key>" + "|".join(re.escape(name) for name in field_names) + ")"
    else:
        field_regex = "(?P<key>.*?)"

    return re.compile(
        "^"
        + re.escape(prefix)
        + re.escape(MARKER)
        + group_regex
        + "-"
        + re.escape(MARKER)
        + field_regex
        + r"_(?P<index>\d+)_?(?P<sub>\w+)?(-(?P<trailing>.*))?$"
    )


def get_complex_field_regex(
    prefix: str,
    group_names: Iterable[str] = (),
    field_names: Iterable[str] = (),
) -> re.Pattern[str]:
    """
    Build the pattern that decomposes storage keys of the complex field ``prefix``.

    Args:
        prefix:      Storage name of the complex field.
        group_names: Registered group names; any word matches when empty.
        field_names: Declared sub-field names; anything matches when empty.
    """
    return _compile(prefix, tuple(group_names), tuple(field_names))


def parse_field_key(
    field_key: str,
    prefix: str,
    group_names: Iterable[str] = (),
    field_names: Iterable[str] = (),
) -> KeyParts | None:
    """Decompose ``field_key``; None when it does not belong to ``prefix``."""
    match = get_complex_field_regex(prefix, group_names, field_names).match(field_key)
    if not match:
        return None

    return KeyParts(
        group=match["group"],
        key=match["key"],
        index=int(match["index"]),
        sub=match["sub"] or None,
        trailing=match["trailing"] or None,
    )


@lru_cache(maxsize=256)
def _compile_owner(prefix: str, group_names: tuple[str, ...]) -> re.Pattern[str]:
    if group_names:
        group_regex = "(?:" + "|".join(re.escape(name) for name in group_names) + ")"
    else:
        group_regex = r"\w*"
    return re.compile("^" + re.escape(prefix) + re.escape(MARKER) + group_regex + "-" + re.escape(MARKER))


def owns_storage_key(prefix: str, field_key: str, group_names: Iterable[str] = ()) -> bool:
    """
    True when ``field_key`` is a row written by the complex field ``prefix``.

    With ``group_names`` only rows of those groups are claimed, so a sibling
    field named ``{prefix}_{something}`` keeps its rows.
    """
    return _compile_owner(prefix, tuple(group_names)).match(field_key) is not None
