"""Rendering helpers for sanitized results."""

from __future__ import annotations

from sui_cli_proxy.storage.models import CommandResult, KeyRecord, RawKeyLine


def format_duration(ms: int) -> str:
    """Format milliseconds to human-readable duration."""
    if ms < 1000:
        return f"{ms}ms"
    elif ms < 60000:
        return f"{ms / 1000:.1f}s"
    else:
        minutes = ms // 60000
        seconds = (ms % 60000) // 1000
        return f"{minutes}m {seconds}s"


def format_status(result: CommandResult) -> str:
    if result.exit_code == 0:
        return "OK"
    if result.exit_code == -1:
        return "ERR(no exit code)"
    return f"ERR({result.exit_code})"


def key_row(record: KeyRecord) -> tuple[str, str, str]:
    """Return (alias, address, scheme) for a key table row."""
    if isinstance(record, RawKeyLine):
        return "", record.raw.strip(), ""
    fields = record.fields
    alias = fields.get("alias") or ""
    address = fields.get("suiAddress") or fields.get("sui_address") or ""
    scheme = fields.get("keyScheme") or fields.get("key_scheme") or ""
    return str(alias), str(address), str(scheme)
