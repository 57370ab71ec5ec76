"""Field containers and their registry."""

from .base import Container, PostMetaContainer
from .registry import ContainerRegistry, container_registry
from .theme_options import ThemeOptionsContainer

__all__ = [
    "Container",
    "PostMetaContainer",
    "ThemeOptionsContainer",
    "ContainerRegistry",
    "container_registry",
]
