"""Exception types raised by the Catalyst Steam core."""

from typing import Optional


class CatalystError(Exception):
    """Base class for all Catalyst errors."""


class MalformedDocument(CatalystError, ValueError):
    """A KeyValues token stream does not form a valid document.

    Attributes:
        position: Index of the offending token (None if unknown)
        key: Key being parsed when the error occurred (None if unknown)
        path: File the document came from, attached by load_document()
    """

    def __init__(self, message: str, position: Optional[int] = None,
                 key: Optional[str] = None, path: Optional[str] = None):
        self.message = message
        self.position = position
        self.key = key
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.key is not None:
            text += f" (key '{self.key}')"
        if self.position is not None:
            text += f" at token {self.position}"
        if self.path:
            text = f"{self.path}: {text}"
        return text

    def with_path(self, path: str) -> "MalformedDocument":
        """Return a copy of this error carrying the source file path."""
        return MalformedDocument(self.message, self.position, self.key, str(path))


class KeyValuesFileError(CatalystError, OSError):
    """Reading or writing a KeyValues file failed."""

    def __init__(self, path: str, operation: str, cause: Exception):
        self.path = str(path)
        self.operation = operation
        self.cause = cause
        super().__init__(f"Could not {operation} {self.path}: {cause}")


class InvalidSettingsError(CatalystError, ValueError):
    """A settings payload carries a mode string outside its closed set."""


class SteamApiError(CatalystError):
    """The Steam web API request failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class SteamNotFoundError(CatalystError):
    """No Steam install root or user directory could be found."""
