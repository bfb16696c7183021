"""Trigger instance model."""
from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from lifecycle.db.database import Base


class TriggerInstance(Base):
    """Trigger subplugin instance bound to a workflow."""

    __tablename__ = "lifecycle_triggers"
    __table_args__ = (
        Index("ix_lifecycle_triggers_workflow_sortindex", "workflow_id", "sortindex"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    workflow_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lifecycle_workflows.id"),
        nullable=False,
    )
    subpluginname: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    instancename: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    sortindex: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
