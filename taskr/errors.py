"""Exceptions raised by taskr."""


class TaskrError(Exception):
    """Base class for every error taskr reports to the user."""


class NotFound(TaskrError):
    """No task matches the given id or name."""

    def __init__(self, token: str):
        super().__init__(f'Task "{token}" not found')
        self.token = token


class InvalidInput(TaskrError):
    """Malformed date, blank name or an unusable argument combination."""


class StorageDegraded(TaskrError):
    """The data file could not be read or parsed.

    Never escapes TaskStore.load(): the store logs it and falls back to an
    empty collection.
    """
