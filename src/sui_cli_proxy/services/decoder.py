"""Best-effort decoding of CLI output into records.

The tools' output formats are outside our control, so the permissive
decoders degrade to a line-based fallback (or ``None``) instead of failing.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sui_cli_proxy.errors import DecodeError
from sui_cli_proxy.storage.models import KeyRecord, RawKeyLine, StructuredKey

logger = logging.getLogger(__name__)

ADDRESS_MARKER = "0x"


def decode_json(text: str) -> Any | None:
    """Parse ``text`` as a JSON document, or return None."""
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return None


def _structured(element: Any) -> StructuredKey:
    if isinstance(element, dict):
        return StructuredKey(fields=element)
    return StructuredKey(fields={"value": element})


def decode_key_list(text: str) -> list[KeyRecord]:
    """Decode a key listing.

    A JSON array yields one StructuredKey per element, in order. Anything
    else falls back to one RawKeyLine per line containing ``0x``.
    """
    data = decode_json(text)
    if isinstance(data, list):
        return [_structured(element) for element in data]

    logger.debug("Key listing is not a JSON array, using line fallback")
    return [RawKeyLine(raw=line) for line in text.splitlines() if ADDRESS_MARKER in line]


def decode_key_list_strict(text: str) -> list[KeyRecord]:
    """Decode a key listing that must be a JSON array."""
    data = decode_json(text)
    if not isinstance(data, list):
        raise DecodeError("Parse error: key listing is not a JSON array")
    return [_structured(element) for element in data]
