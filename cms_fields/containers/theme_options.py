"""Site-wide options container."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from cms_fields.containers.base import Container
from cms_fields.datastore.base import Datastore
from cms_fields.datastore.meta import MetaDatastore

OPTIONS_OBJECT_ID = 0


class ThemeOptionsContainer(Container):
    """
    Fields holding site-wide settings.

    Values are not tied to a content object: every request reads and writes
    the ``option`` object. ``settings`` describes where the admin page lives
    and who may edit it; wiring it into a menu is left to the admin UI.
    """

    type = "theme_options"
    object_type = "option"

    def __init__(self, title: str, id: str | None = None) -> None:
        super().__init__(title, id)
        self.settings: dict[str, Any] = {
            "parent": "theme-options.php",
            "file": "theme-options.php",
            "permissions": "edit_themes",
            "type": "sub",
        }

    def set_page_settings(self, **settings: Any) -> ThemeOptionsContainer:
        self.settings = {**self.settings, **settings}
        return self

    def datastore_for(self, session: Session, object_id: int) -> Datastore:
        return MetaDatastore(session, object_type=self.object_type, object_id=OPTIONS_OBJECT_ID)

    def settings_json(self) -> dict[str, Any]:
        return dict(self.settings)
