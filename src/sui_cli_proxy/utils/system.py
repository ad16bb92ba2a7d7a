"""Installation checks for the external tools."""

from __future__ import annotations

import shutil
import subprocess
from typing import Sequence

from sui_cli_proxy.services.runner import build_search_path


def check_tool(binary: str, extra_paths: Sequence[str] = ()) -> tuple[bool, str]:
    """Check if ``binary`` is installed and return its version string."""
    path = shutil.which(binary, path=build_search_path(extra_paths))
    if not path:
        return False, f"{binary} not found on PATH"
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=10,
        )
        version = result.stdout.strip() or result.stderr.strip()
        return True, version
    except subprocess.TimeoutExpired:
        return False, f"{binary} version check timed out"
    except OSError as e:
        return False, f"Error checking {binary}: {e}"
