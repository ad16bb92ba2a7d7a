"""Secret patterns recognized in tool output, in the order they are applied."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

PRIVATE_KEY_PREFIX = "suiprivkey"
PRIVATE_KEY_MASK = "****"
MNEMONIC_TAG = "[MNEMONIC]"
MNEMONIC_MIN_WORDS = 12
MNEMONIC_MAX_WORDS = 24

# [^\W_] is a letter or digit in any script.
PRIVATE_KEY_RE = re.compile(PRIVATE_KEY_PREFIX + r"[^\W_]+")
# 0x + 64 hex wherever it appears; surrounding characters do not matter.
ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{64}")
# Maximal run of lowercase words. A word may not follow "." so the
# hex tail of a masked address ("0x1a2b...beef") never starts a run.
WORD_RUN_RE = re.compile(r"(?<![\w.])[a-z]+(?:\s+[a-z]+)*(?!\w)")


def partial_mask(address: str) -> str:
    """Keep ``0x``, the first and the last four hex digits."""
    return f"0x{address[2:6]}...{address[-4:]}"


def _mask_match(match: re.Match[str]) -> str:
    return partial_mask(match.group(0))


@dataclass(frozen=True)
class ExactTokenRule:
    """Replace every match with a fixed mask."""

    name: str
    pattern: re.Pattern[str]
    mask: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.mask, text)


@dataclass(frozen=True)
class PartialMaskRule:
    """Replace every match with a mask that keeps its prefix and suffix."""

    name: str
    pattern: re.Pattern[str]

    def apply(self, text: str) -> str:
        # The mask keeps hex at its end, which can complete a new match with
        # the text after it ("0x" + 63 hex + "0x" + 64 hex). Repeat until none is left.
        text, count = self.pattern.subn(_mask_match, text)
        while count:
            text, count = self.pattern.subn(_mask_match, text)
        return text


@dataclass(frozen=True)
class WordRunRule:
    """Replace word runs whose length falls inside [min_words, max_words]."""

    name: str
    pattern: re.Pattern[str]
    tag: str
    min_words: int
    max_words: int

    def apply(self, text: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            run = match.group(0)
            if self.min_words <= len(run.split()) <= self.max_words:
                return self.tag
            return run

        return self.pattern.sub(_replace, text)


SecretPattern = Union[ExactTokenRule, PartialMaskRule, WordRunRule]

SECRET_PATTERNS: tuple[SecretPattern, ...] = (
    ExactTokenRule(name="private_key", pattern=PRIVATE_KEY_RE, mask=PRIVATE_KEY_MASK),
    PartialMaskRule(name="address", pattern=ADDRESS_RE),
    WordRunRule(
        name="mnemonic",
        pattern=WORD_RUN_RE,
        tag=MNEMONIC_TAG,
        min_words=MNEMONIC_MIN_WORDS,
        max_words=MNEMONIC_MAX_WORDS,
    ),
)
