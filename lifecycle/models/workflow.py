"""Workflow model."""
from datetime import datetime
from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from lifecycle.db.database import Base


class Workflow(Base):
    """Workflow entity.

    ``sortindex`` is only held by active automatic workflows and ranks them
    densely from 1. ``manual`` is unknown until the workflow is activated.
    """

    __tablename__ = "lifecycle_workflows"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
    manual: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
    )
    sortindex: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    timeactive: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    timedeactive: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"Workflow(id={self.id!r}, title={self.title!r}, active={self.active!r}, "
            f"manual={self.manual!r}, sortindex={self.sortindex!r})"
        )
