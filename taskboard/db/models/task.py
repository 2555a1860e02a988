"""
Task model: one row per submitted task
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, false, func
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.db.models.base import Base


class Task(Base):
    """Task table"""

    __tablename__ = "tasks"
    # ids are never reused, even after the highest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user: Mapped[str] = mapped_column(String(255), nullable=False, index=True, comment="submitter")
    task: Mapped[str] = mapped_column(String(1024), nullable=False, comment="task text")
    finished: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), comment="completed flag"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), comment="created at"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), comment="updated at"
    )

    def to_dict(self) -> dict:
        """Wire shape pushed to stream subscribers"""
        return {
            "id": self.id,
            "user": self.user,
            "task": self.task,
            "finished": self.finished,
        }
