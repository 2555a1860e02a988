"""
Task schemas: submission validation + service results
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

# ── Response messages ──

TASK_SUBMITTED = "Your task is submitted! Get to work!"
TASK_OPEN_EXISTS = "You must finish your open task first"
TASK_FINISHED = "Nailed it! Look at you go!"
NO_OPEN_TASKS = "You have no open tasks"
TASK_REMOVED = "Your task has been removed"
TASK_NOT_FOUND = "Could not find that task. Double check your post number."
DELETE_UNAUTHORIZED = "Unauthorized. You can only delete your own tasks."
TASKS_RESET = "All tasks reset."
RESET_FORBIDDEN = "Only the stream owner can delete all tasks."

USER_REQUIRED = "User must have a value"
TASK_REQUIRED = "Task must have a value"


class TaskSubmission(BaseModel):
    """createTask query parameters; missing values default to "" and still get validated"""

    model_config = ConfigDict(validate_default=True)

    user: str = ""
    task: str = ""

    @field_validator("user")
    @classmethod
    def _user_required(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("required", USER_REQUIRED)
        return v

    @field_validator("task")
    @classmethod
    def _task_required(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("required", TASK_REQUIRED)
        return v


@dataclass(frozen=True)
class TaskResult:
    """Outcome of a task operation

    changed=True: the store was mutated and a snapshot was pushed (HTTP 201).
    changed=False: refusal or empty state, nothing touched (HTTP 200).
    """

    message: str
    changed: bool = False
