"""Exceptions raised by the memo store."""


class MemoError(Exception):
    """Base exception for memo operations."""


class MemoNotFoundError(MemoError):
    """Raised when no memo matches a title or filename."""

    def __init__(self, title: str) -> None:
        super().__init__(f'Memo "{title}" not found')
        self.title = title


class MemoAlreadyExistsError(MemoError):
    """Raised when a create targets a filename that is already taken."""

    def __init__(self, title: str, filename: str) -> None:
        super().__init__(f'Memo "{title}" already exists ({filename})')
        self.title = title
        self.filename = filename


class MemoStorageError(MemoError):
    """Raised when the underlying filesystem operation fails."""
