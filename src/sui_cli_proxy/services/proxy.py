"""Command proxy: the only way the front-end talks to the CLI tools.

Every operation maps to a fixed argument vector for ``sui`` or ``walrus``,
runs it through the ProcessRunner and sanitizes both output streams before
returning. Raw tool output never leaves this module.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from sui_cli_proxy.config import AppConfig
from sui_cli_proxy.errors import InvalidRequestError, SpawnError
from sui_cli_proxy.services.decoder import decode_json, decode_key_list, decode_key_list_strict
from sui_cli_proxy.services.runner import ProcessRunner
from sui_cli_proxy.services.sanitizer import sanitize, sanitize_args
from sui_cli_proxy.storage.models import (
    CommandRequest,
    CommandResult,
    Executable,
    KeyRecord,
    RawKeyLine,
    StructuredKey,
)
from sui_cli_proxy.storage.session import SessionState

logger = logging.getLogger(__name__)

KEY_SCHEMES = ("ed25519", "secp256k1", "secp256r1")
WORD_LENGTHS = (12, 15, 18, 21, 24)

# Fields of a keytool entry that are safe to hand out (after sanitizing).
KEY_FIELDS = frozenset(
    {
        "alias",
        "suiAddress",
        "sui_address",
        "publicBase64Key",
        "public_base64_key",
        "keyScheme",
        "key_scheme",
        "flag",
        "peerId",
        "peer_id",
        "value",
    }
)


def _scrub_value(value: Any) -> Any:
    """Sanitize every string in ``value``, at any depth."""
    if isinstance(value, str):
        return sanitize(value)
    if isinstance(value, (list, tuple)):
        return [_scrub_value(v) for v in value]
    if isinstance(value, dict):
        return {_scrub_value(k): _scrub_value(v) for k, v in value.items()}
    return value


def scrub_key_record(record: KeyRecord) -> KeyRecord:
    """Reduce a decoded key entry to non-secret, sanitized fields."""
    if isinstance(record, RawKeyLine):
        return RawKeyLine(raw=sanitize(record.raw))
    fields: dict[str, Any] = {}
    for key, value in record.fields.items():
        if key not in KEY_FIELDS:
            continue
        try:
            fields[key] = _scrub_value(value)
        except RecursionError:
            logger.warning("Dropped key field %s: nested too deeply to sanitize", key)
    return StructuredKey(fields=fields)


class CommandProxy:
    """Run sui/walrus operations and return sanitized results."""

    def __init__(
        self,
        config: AppConfig,
        runner: ProcessRunner | None = None,
        session: SessionState | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or ProcessRunner(config)
        self.session = session or SessionState(config.session.cache_size)

    # --- plumbing ---

    def _binary(self, executable: Executable) -> str:
        if executable is Executable.SUI:
            return self.config.tools.sui
        return self.config.tools.walrus

    def _clean(self, text: str) -> str:
        text = sanitize(text)
        max_out = self.config.runner.max_output
        if max_out and len(text) > max_out:
            text = text[:max_out]
        return text

    async def _spawn(self, request: CommandRequest, failure: str) -> CommandResult:
        """Run ``request`` and return the unsanitized result. Stays in this module."""
        try:
            return await self.runner.run(self._binary(request.executable), request.args)
        except SpawnError as e:
            raise SpawnError(f"{failure}: {e.message}") from e

    async def _invoke(self, request: CommandRequest, failure: str) -> CommandResult:
        raw = await self._spawn(request, failure)
        result = raw.replace_streams(self._clean(raw.stdout), self._clean(raw.stderr))
        self.session.remember(request.cache_key, result)
        return result

    def cached(self, executable: Executable | str, args: Sequence[str] = ()) -> CommandResult | None:
        """Return the last sanitized result for this exact command, if still cached."""
        return self.session.recall(CommandRequest(Executable(executable), tuple(args)).cache_key)

    @property
    def last_command(self) -> str:
        return self.session.last_command

    # --- sui ---

    async def execute_command(self, args: Sequence[str]) -> CommandResult:
        """Run an arbitrary ``sui`` command."""
        request = CommandRequest(Executable.SUI, tuple(args))
        result = await self._invoke(request, "Failed to execute")
        self.session.set_last_command(" ".join(sanitize_args(request.args)))
        return result

    async def list_keys(self, strict: bool = False) -> list[KeyRecord]:
        """List keystore entries, reduced to their public fields.

        With ``strict`` the output must be a JSON array; anything else raises
        DecodeError instead of falling back to matching lines.
        """
        request = CommandRequest(Executable.SUI, ("keytool", "--json", "list"))
        raw = await self._spawn(request, "Failed to list keys")
        decode = decode_key_list_strict if strict else decode_key_list
        # Decode the raw text so JSON structure survives; scrub each record after.
        records = [scrub_key_record(r) for r in decode(raw.stdout)]
        logger.debug("Decoded %d key records", len(records))
        return records

    async def generate_key(self, scheme: str, word_length: int | None = None) -> CommandResult:
        if scheme not in KEY_SCHEMES:
            raise InvalidRequestError(
                f"Unsupported key scheme: {scheme} (expected one of {', '.join(KEY_SCHEMES)})"
            )
        args = ["keytool", "generate", scheme]
        if word_length is not None:
            if word_length not in WORD_LENGTHS:
                raise InvalidRequestError(
                    f"Unsupported word length: {word_length} "
                    f"(expected one of {', '.join(map(str, WORD_LENGTHS))})"
                )
            args.extend(["--word-length", str(word_length)])
        return await self._invoke(CommandRequest(Executable.SUI, tuple(args)), "Failed to generate key")

    async def set_active_key(self, address: str) -> CommandResult:
        request = CommandRequest(Executable.SUI, ("client", "switch", "--address", address))
        return await self._invoke(request, "Failed to switch key")

    async def get_active_address(self) -> str:
        """Return the active address, partially masked."""
        request = CommandRequest(Executable.SUI, ("client", "active-address"))
        result = await self._invoke(request, "Failed to get active address")
        return result.stdout.strip()

    async def get_environment(self) -> dict[str, Any]:
        """Return the configured environments.

        ``envs`` always holds the sanitized text; ``aliases`` and ``active``
        are added when the JSON output has the expected ``[envs, active]`` shape.
        """
        request = CommandRequest(Executable.SUI, ("client", "envs", "--json"))
        result = await self._invoke(request, "Failed to get environment")
        environment: dict[str, Any] = {"envs": result.stdout}

        data = decode_json(result.stdout)
        if isinstance(data, list) and len(data) == 2 and isinstance(data[0], list):
            environment["aliases"] = [
                env.get("alias") for env in data[0] if isinstance(env, dict) and "alias" in env
            ]
            environment["active"] = data[1] if isinstance(data[1], str) else None
        return environment

    # --- walrus ---

    async def upload_blob(self, path: str, epochs: int | None = None) -> CommandResult:
        args = ["store", path]
        if epochs is not None:
            _require_positive("epochs", epochs)
            args.extend(["--epochs", str(epochs)])
        return await self._invoke(CommandRequest(Executable.WALRUS, tuple(args)), "Failed to upload blob")

    async def download_blob(self, blob_id: str, output_path: str | None = None) -> CommandResult:
        args = ["read", blob_id]
        if output_path:
            args.extend(["--out", output_path])
        return await self._invoke(CommandRequest(Executable.WALRUS, tuple(args)), "Failed to download blob")

    async def list_blobs(self) -> CommandResult:
        return await self._invoke(CommandRequest(Executable.WALRUS, ("list-blobs",)), "Failed to list blobs")

    async def blob_status(self, blob_id: str) -> CommandResult:
        request = CommandRequest(Executable.WALRUS, ("blob-status", "--blob-id", blob_id))
        return await self._invoke(request, "Failed to get blob status")

    async def delete_blob(self, blob_id: str) -> CommandResult:
        request = CommandRequest(Executable.WALRUS, ("delete", "--blob-id", blob_id, "--yes"))
        return await self._invoke(request, "Failed to delete blob")

    async def extend_blob(self, object_id: str, epochs: int) -> CommandResult:
        _require_positive("epochs", epochs)
        request = CommandRequest(
            Executable.WALRUS, ("extend", "--blob-obj-id", object_id, "--epochs", str(epochs))
        )
        return await self._invoke(request, "Failed to extend blob")

    async def storage_info(self) -> CommandResult:
        return await self._invoke(CommandRequest(Executable.WALRUS, ("info",)), "Failed to get storage info")


def _require_positive(name: str, value: int) -> None:
    if value < 1:
        raise InvalidRequestError(f"{name} must be a positive integer, got {value}")
