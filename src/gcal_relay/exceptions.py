"""Client-side errors raised when talking to the relay."""
from typing import Optional


class RelayError(Exception):
    """The relay answered with a failure envelope or could not be reached.

    ``status_code`` is None for transport errors.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"
