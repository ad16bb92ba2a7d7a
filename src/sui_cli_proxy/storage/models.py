"""Data models for sui-cli-proxy."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

NO_EXIT_CODE = -1


class Executable(str, Enum):
    """External tools the proxy is allowed to launch."""

    SUI = "sui"
    WALRUS = "walrus"


@dataclass(frozen=True)
class CommandRequest:
    """One tool invocation: which executable and its argument vector."""

    executable: Executable
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept plain strings ("sui") and lists for convenience.
        object.__setattr__(self, "executable", Executable(self.executable))
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    @property
    def cache_key(self) -> str:
        return " ".join((self.executable.value, *self.args))


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one finished process."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = NO_EXIT_CODE
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def replace_streams(self, stdout: str, stderr: str) -> CommandResult:
        return dataclasses.replace(self, stdout=stdout, stderr=stderr)

    def to_dict(self) -> dict[str, Any]:
        """Shape handed to the front-end."""
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exitCode": self.exit_code,
            "durationMs": self.duration_ms,
        }


@dataclass(frozen=True)
class StructuredKey:
    """A key entry recovered from JSON output."""

    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.fields)


@dataclass(frozen=True)
class RawKeyLine:
    """A key entry recovered only as a line of text."""

    raw: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"raw": self.raw}


KeyRecord = Union[StructuredKey, RawKeyLine]
