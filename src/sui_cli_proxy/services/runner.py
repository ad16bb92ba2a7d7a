"""Subprocess runner for the external CLI tools."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Sequence

from sui_cli_proxy.config import AppConfig
from sui_cli_proxy.errors import SpawnError
from sui_cli_proxy.services.sanitizer import sanitize_args
from sui_cli_proxy.storage.models import NO_EXIT_CODE, CommandResult

logger = logging.getLogger(__name__)


def build_search_path(extra_paths: Sequence[str], base: str | None = None) -> str:
    """Prepend ``extra_paths`` to ``base`` (default: the current PATH)."""
    if base is None:
        base = os.environ.get("PATH", "")
    parts = [str(Path(p).expanduser()) for p in extra_paths]
    if base:
        parts.append(base)
    return os.pathsep.join(parts)


def exit_code_of(returncode: int | None) -> int:
    """Map a return code to an exit code, -1 when none is available.

    asyncio reports death by signal N as -N, which is not an exit code.
    """
    if returncode is None or returncode < 0:
        return NO_EXIT_CODE
    return returncode


class ProcessRunner:
    """Run one executable per call and capture its output.

    Arguments are passed as a vector (``create_subprocess_exec``), never
    through a shell.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def _child_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["PATH"] = build_search_path(self.config.tools.extra_paths)
        return env

    async def run(self, executable: str, args: Sequence[str]) -> CommandResult:
        """Execute ``executable`` with ``args`` and wait for it to exit.

        Raises SpawnError if the process cannot be started. A non-zero exit
        status is returned in the result, not raised.
        """
        display = " ".join(sanitize_args([executable, *args]))
        timeout = self.config.runner.timeout or None
        logger.debug("Spawning: %s", display)

        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._child_env(),
            )
        except FileNotFoundError as e:
            logger.warning("Executable not found: %s", executable)
            raise SpawnError(f"{executable}: command not found") from e
        except PermissionError as e:
            logger.warning("Permission denied: %s", executable)
            raise SpawnError(f"{executable}: permission denied") from e
        except OSError as e:
            logger.warning("Could not start %s: %s", executable, e)
            raise SpawnError(f"{executable}: {e.strerror or e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
            exit_code = exit_code_of(proc.returncode)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.communicate()
            logger.warning("Timed out after %ss: %s", timeout, display)
            stdout_bytes = b""
            stderr_bytes = f"{executable} timed out after {timeout}s".encode()
            exit_code = NO_EXIT_CODE

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("Finished (exit %d, %dms): %s", exit_code, elapsed_ms, display)

        return CommandResult(
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
            exit_code=exit_code,
            duration_ms=elapsed_ms,
        )
