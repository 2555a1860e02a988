"""
Model exports: importing this package registers every table on Base.metadata
"""

from taskboard.db.models.base import Base
from taskboard.db.models.task import Task

__all__ = ["Base", "Task"]
