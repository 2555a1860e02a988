"""
Task errors

Only malformed submissions raise. Business refusals (duplicate open task, not
found, wrong owner, non-admin reset) come back as ordinary TaskResult values.
"""


class TaskValidationError(Exception):
    """A submission is missing required fields"""

    message = "Submission was invalid."

    def __init__(self, errors: list[str]):
        super().__init__(self.message)
        self.errors = errors
