"""Step instance model."""
from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from lifecycle.db.database import Base


class StepInstance(Base):
    """Step subplugin instance; ``sortindex`` is its 1-based position in the workflow."""

    __tablename__ = "lifecycle_steps"
    __table_args__ = (
        Index("ix_lifecycle_steps_workflow_sortindex", "workflow_id", "sortindex"),
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
