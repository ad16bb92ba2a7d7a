"""Error types surfaced by the command proxy."""

from __future__ import annotations


class ProxyError(Exception):
    """Base error. ``str(error)`` is the message shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SpawnError(ProxyError):
    """The executable could not be found or started."""


class DecodeError(ProxyError):
    """Tool output did not have the shape a strict decoder requires."""


class InvalidRequestError(ProxyError):
    """An operation was called with arguments that cannot be sent to the tool."""
