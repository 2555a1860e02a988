"""
Task module: shared to-do list with one open task per user

TaskService enforces the rules on top of TaskStore; TaskNotifier pushes the
full list to every SubscriberRegistry queue after each change.
"""

from taskboard.tasks.errors import TaskValidationError
from taskboard.tasks.notifier import SubscriberRegistry, TaskNotifier
from taskboard.tasks.schemas import TaskResult
from taskboard.tasks.service import TaskService
from taskboard.tasks.store import TaskStore

__all__ = [
    "SubscriberRegistry",
    "TaskNotifier",
    "TaskResult",
    "TaskService",
    "TaskStore",
    "TaskValidationError",
]
