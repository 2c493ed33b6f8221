"""Exceptions raised by projectlens."""


class RepositoryError(RuntimeError):
    """The Git repository could not be opened or read."""
