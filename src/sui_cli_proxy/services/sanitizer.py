"""Redaction of private keys, addresses and mnemonics from tool output."""

from __future__ import annotations

from typing import Iterable, Sequence

from sui_cli_proxy.services.patterns import SECRET_PATTERNS, SecretPattern, partial_mask


def sanitize(text: str, patterns: Sequence[SecretPattern] = SECRET_PATTERNS) -> str:
    """Apply every secret pattern to ``text``, in order.

    Each rule's replacement is a token no later rule can match or extend,
    so the result is stable under repeated sanitization and never longer
    than the input.
    """
    if not text:
        return text
    for rule in patterns:
        text = rule.apply(text)
    return text


def sanitize_args(args: Iterable[str]) -> list[str]:
    """Sanitize an argument vector element by element."""
    return [sanitize(arg) for arg in args]


def mask_address(address: str) -> str:
    """Partially mask an address the caller already knows is well formed.

    Strings shorter than 10 characters are returned unchanged.
    """
    if len(address) < 10:
        return address
    return partial_mask(address)
