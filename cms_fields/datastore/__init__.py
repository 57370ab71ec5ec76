"""Storage backends fields persist their values to."""

from .base import Datastore
from .memory import MemoryDatastore
from .meta import MetaDatastore

__all__ = [
    "Datastore",
    "MemoryDatastore",
    "MetaDatastore",
]
