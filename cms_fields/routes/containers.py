"""Container routes: export field definitions, load and save field values."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from cms_fields.containers.base import Container
from cms_fields.containers.registry import container_registry
from cms_fields.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/containers", tags=["Containers"])


def _bind(container_id: str, object_id: int, db: Session) -> Container:
    container = container_registry.get(container_id)
    return container.spawn(container.datastore_for(db, object_id))


@router.get("")
def list_containers() -> dict[str, Any]:
    """Return every registered container with its field definitions."""
    return container_registry.get_json_data(load=False)


@router.get("/{container_id}/objects/{object_id}")
def get_container_values(container_id: str, object_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Return a container with the values stored for one object."""
    return _bind(container_id, object_id, db).to_json(load=True)


@router.put("/{container_id}/objects/{object_id}")
def save_container_values(
    container_id: str,
    object_id: int,
    input: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Bind the submitted values to the container's fields and store them."""
    container = _bind(container_id, object_id, db)
    container.save(input)

    logger.info("Saved %s values for object %s", container_id, object_id)
    return _bind(container_id, object_id, db).to_json(load=True)


@router.delete("/{container_id}/objects/{object_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_container_values(container_id: str, object_id: int, db: Session = Depends(get_db)) -> Response:
    """Remove every value the container stores for one object."""
    _bind(container_id, object_id, db).delete()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
