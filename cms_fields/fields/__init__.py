"""Field definitions, the complex field engine and its storage helpers."""

from .base import Field
from .basic import MapField, SelectField, TextareaField, TextField
from .complex import ComplexField, GroupInstance, Layout, SaveMode
from .group import GroupField
from .registry import FieldTypeRegistry, field_types, make_field
from .transcoder import StorageRow

__all__ = [
    "Field",
    "TextField",
    "TextareaField",
    "SelectField",
    "MapField",
    "ComplexField",
    "GroupInstance",
    "Layout",
    "SaveMode",
    "GroupField",
    "FieldTypeRegistry",
    "field_types",
    "make_field",
    "StorageRow",
]
