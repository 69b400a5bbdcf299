from __future__ import annotations


class NotFoundError(Exception):
    """A requested task or task list does not exist."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @classmethod
    def task(cls, task_id: str) -> "NotFoundError":
        return cls(f"Task with ID: {task_id} -- WAS NOT FOUND!")

    @classmethod
    def task_list(cls, task_list_id: str) -> "NotFoundError":
        return cls(f"Task list with ID: {task_list_id} -- WAS NOT FOUND!")


class PersistenceError(Exception):
    """The store failed; details are logged, never shown to the caller."""
