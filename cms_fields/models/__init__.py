from .field_meta import FieldMeta

__all__ = [
    "FieldMeta",
]
