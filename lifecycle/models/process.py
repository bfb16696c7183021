"""Process model."""
from datetime import UTC, datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column
from lifecycle.db.database import Base


def _utcnow():
    """Return current UTC time without timezone info (for SQLite compat)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Process(Base):
    """A workflow running against one course.

    ``stepindex`` 0 means no step has been started yet.
    """

    __tablename__ = "lifecycle_processes"
    __table_args__ = (
        Index("ix_lifecycle_processes_workflow", "workflow_id"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        unique=True,
    )
    workflow_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lifecycle_workflows.id"),
        nullable=False,
    )
    stepindex: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    waiting: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    timestepchanged: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
