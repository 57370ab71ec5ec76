"""Custom fields for content objects: definitions, repeaters and metadata storage."""

__version__ = "1.0.0"
