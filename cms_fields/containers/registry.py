"""
Container Registry

ContainerRegistry: in-process singleton holding the registered containers
and exporting their JSON for the admin UI.
"""

from __future__ import annotations

import logging
from typing import Any

from cms_fields.containers.base import Container, PostMetaContainer
from cms_fields.containers.theme_options import ThemeOptionsContainer
from cms_fields.exceptions import ConfigurationError, ContainerNotFoundError

logger = logging.getLogger(__name__)

CONTAINER_TYPES: dict[str, type[Container]] = {
    PostMetaContainer.type: PostMetaContainer,
    ThemeOptionsContainer.type: ThemeOptionsContainer,
}


class ContainerRegistry:
    """
    In-process registry of field containers.

    Containers are stored by id in registration order.
    """

    def __init__(self) -> None:
        self._containers: dict[str, Container] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, container: Container) -> Container:
        """Register a container; ids must be unique."""
        if container.id in self._containers:
            raise ConfigurationError(
                f'Container "{container.id}" already registered',
                details={"container": container.id},
            )
        self._containers[container.id] = container
        logger.info("Container registered: %s (%s)", container.id, container.type)
        return container

    def make_container(self, type_name: str, title: str, id: str | None = None) -> Container:
        """Create a container of a known type and register it."""
        container_class = CONTAINER_TYPES.get(type_name)
        if container_class is None:
            raise ConfigurationError(
                f'Unknown container type "{type_name}"',
                details={"type": type_name, "available": list(CONTAINER_TYPES)},
            )
        return self.register(container_class(title, id))

    def clear(self) -> None:
        self._containers.clear()

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, container_id: str) -> Container:
        """Return the container with the given id; raises ContainerNotFoundError."""
        container = self._containers.get(container_id)
        if container is None:
            raise ContainerNotFoundError(container_id)
        return container

    def all_containers(self) -> list[Container]:
        return list(self._containers.values())

    def is_registered(self, container_id: str) -> bool:
        return container_id in self._containers

    # ── Export ────────────────────────────────────────────────────────────────

    def get_json_data(self, load: bool = False) -> dict[str, Any]:
        """
        Return the data the admin UI is bootstrapped with.

        Args:
            load: Load every field's value first; containers must have a
                  datastore bound for this.
        """
        return {"containers": [container.to_json(load) for container in self.all_containers()]}


# ── Global singleton ──────────────────────────────────────────────────────────
# Field definitions register their containers here at startup.
container_registry = ContainerRegistry()
