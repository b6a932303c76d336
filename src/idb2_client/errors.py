"""Error types for the InfluxDB v2 line-protocol client.

Two families of errors:

* ``PreconditionError``: caller misuse of the builder/encoder (missing
  measurement, no fields, unset timestamp, ...). It derives from
  ``AssertionError``, not from ``Idb2Error``; ``except Idb2Error`` does not
  catch it.
* ``Idb2Error`` and subclasses: runtime failures from the server or the
  network. No retries are performed by the library.
"""

from __future__ import annotations

import inspect
import os


class PreconditionError(AssertionError):
    """A usage invariant was violated by the calling code.

    Attributes:
        condition: Human readable description of the violated condition.
        location: ``"file:line"`` of the caller that triggered the check.
    """

    def __init__(self, condition: str, location: str = "<unknown>") -> None:
        super().__init__(f'Precondition failed: "{condition}" @{location} (caller misuse, not a runtime error)')
        self.condition = condition
        self.location = location


def require(condition: bool, description: str, stacklevel: int = 2) -> None:
    """Raise ``PreconditionError`` unless *condition* holds.

    *stacklevel* picks the reported frame the same way ``warnings.warn``
    does: 1 is the function calling ``require``, 2 (default) its caller.
    """
    if condition:
        return
    frame = inspect.currentframe().f_back
    for _ in range(stacklevel - 1):
        if frame.f_back is None:
            break
        frame = frame.f_back
    location = f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
    raise PreconditionError(description, location)


class Idb2Error(Exception):
    """Base exception for all runtime client errors."""

    def is_retryable(self) -> bool:
        """Whether the failed operation may succeed if repeated unchanged."""
        return False


class TransportError(Idb2Error):
    """The request never produced an HTTP response (refused, DNS, timeout)."""

    def is_retryable(self) -> bool:
        return True


class PostError(Idb2Error):
    """The server answered a write with a non-success status."""

    def __init__(self, status_code: int, response: str = "") -> None:
        super().__init__(f"Error posting data: {status_code}")
        self.status_code = status_code
        self.response = response

    def is_retryable(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500


def error_from_response(status_code: int, body: str) -> PostError:
    """Create the exception for a rejected write response."""
    return PostError(status_code, body)
