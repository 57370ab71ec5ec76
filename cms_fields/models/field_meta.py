"""Key/value metadata rows holding field values."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from cms_fields.database import Base


class FieldMeta(Base):
    """One stored value of a field, attached to a content object."""

    __tablename__ = "field_meta"

    id = Column(Integer, primary_key=True, index=True)

    # Owning object, e.g. ("post", 42) or ("option", 0) for site-wide values
    object_type = Column(String(20), nullable=False, default="post")
    object_id = Column(Integer, nullable=False, default=0)

    # Storage key and serialized value
    meta_key = Column(String(255), nullable=False)
    meta_value = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("object_type", "object_id", "meta_key", name="uq_field_meta_object_key"),
        Index("ix_field_meta_object", "object_type", "object_id"),
    )
