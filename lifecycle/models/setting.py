"""Subplugin instance setting model."""
from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from lifecycle.db.database import Base

SETTINGS_TYPE_TRIGGER = "trigger"
SETTINGS_TYPE_STEP = "step"


class Setting(Base):
    """One key/value setting of a trigger or step instance."""

    __tablename__ = "lifecycle_settings"
    __table_args__ = (
        UniqueConstraint("instance_id", "type", "name", name="uq_lifecycle_settings_instance_name"),
        Index("ix_lifecycle_settings_instance_type", "instance_id", "type"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    instance_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    pluginname: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    value: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
