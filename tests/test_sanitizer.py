"""Tests for secret patterns and the sanitizer."""

from __future__ import annotations

import pytest

from sui_cli_proxy.services.patterns import (
    ADDRESS_RE,
    MNEMONIC_TAG,
    PRIVATE_KEY_MASK,
    SECRET_PATTERNS,
    ExactTokenRule,
    PartialMaskRule,
    WordRunRule,
)
from sui_cli_proxy.services.sanitizer import mask_address, sanitize, sanitize_args

ADDRESS = "0x" + "a1b2c3d4" * 8
MASKED_ADDRESS = "0xa1b2...c3d4"

WORDS = (
    "abandon ability able about above absent absorb abstract absurd abuse access accident "
    "account accuse achieve acid acoustic acquire across act action actor actress actual adapt"
).split()


def words(n: int) -> str:
    return " ".join(WORDS[:n])


class TestPatternSet:
    def test_rule_order(self):
        assert [rule.name for rule in SECRET_PATTERNS] == ["private_key", "address", "mnemonic"]

    def test_rule_kinds(self):
        assert isinstance(SECRET_PATTERNS[0], ExactTokenRule)
        assert isinstance(SECRET_PATTERNS[1], PartialMaskRule)
        assert isinstance(SECRET_PATTERNS[2], WordRunRule)


class TestPrivateKey:
    def test_whole_token_masked(self):
        assert sanitize("suiprivkey1qzg8x7abcDEF0123") == PRIVATE_KEY_MASK

    @pytest.mark.parametrize("suffix", ["a", "Z", "9", "qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq"])
    def test_nothing_survives(self, suffix):
        assert sanitize("suiprivkey" + suffix) == "****"

    def test_embedded_in_text(self):
        out = sanitize("exported: suiprivkeyABC123, keep it safe")
        assert out == "exported: ****, keep it safe"

    def test_lowercase_key_masked_before_mnemonic_rule(self):
        assert sanitize("suiprivkeyabcdefghij") == PRIVATE_KEY_MASK

    def test_prefix_alone_untouched(self):
        assert sanitize("suiprivkey") == "suiprivkey"


class TestAddress:
    def test_masked(self):
        assert sanitize(ADDRESS) == MASKED_ADDRESS

    @pytest.mark.parametrize(
        "hex64",
        ["0" * 64, "f" * 64, "ABCDEF0123456789" * 4, "deadbeef" * 8],
    )
    def test_prefix_and_suffix_kept(self, hex64):
        assert sanitize("0x" + hex64) == f"0x{hex64[:4]}...{hex64[-4:]}"

    def test_in_sentence(self):
        assert sanitize(f"Active address: {ADDRESS}.") == f"Active address: {MASKED_ADDRESS}."

    def test_short_hex_untouched(self):
        assert sanitize("0x2") == "0x2"
        assert sanitize("0x" + "a" * 63) == "0x" + "a" * 63

    def test_longer_hex_masks_first_64(self):
        assert sanitize("0x" + "a" * 65) == "0xaaaa...aaaa" + "a"

    @pytest.mark.parametrize("suffix", ["f", "zz", "_", "9abc"])
    def test_glued_suffix_still_masked(self, suffix):
        assert sanitize(ADDRESS + suffix) == MASKED_ADDRESS + suffix

    def test_glued_prefix_still_masked(self):
        assert sanitize("id" + ADDRESS) == "id" + MASKED_ADDRESS

    def test_mask_tail_completing_a_new_address(self):
        text = "0x" + "a" * 63 + "0x" + "b" * 64
        assert sanitize(text) == "0xaaaa...aaa0xbbbb...bbbb"

    def test_multiple_addresses(self):
        other = "0x" + "9" * 64
        assert sanitize(f"{ADDRESS} -> {other}") == f"{MASKED_ADDRESS} -> 0x9999...9999"


class TestMnemonic:
    @pytest.mark.parametrize("n", [12, 15, 18, 21, 24])
    def test_run_replaced(self, n):
        assert sanitize(words(n)) == MNEMONIC_TAG

    @pytest.mark.parametrize("n", [11, 25])
    def test_run_outside_range_untouched(self, n):
        assert sanitize(words(n)) == words(n)

    def test_run_inside_json_string(self):
        text = '{"recoveryPhrase": "' + words(12) + '"}'
        assert sanitize(text) == '{"recoveryPhrase": "' + MNEMONIC_TAG + '"}'

    def test_run_after_label(self):
        assert sanitize("Secret Recovery Phrase: " + words(12)) == "Secret Recovery Phrase: " + MNEMONIC_TAG

    def test_run_across_newlines(self):
        text = "\n".join(WORDS[:12])
        assert sanitize(text) == MNEMONIC_TAG

    def test_oversized_run_spanning_lines_untouched(self):
        # Runs are maximal across line breaks, so a 12-word line glued to a
        # 25-word line forms one 37-word run and is left alone.
        text = words(25) + "\n" + words(12)
        assert sanitize(text) == text

    def test_capitalized_words_break_run(self):
        text = words(6) + " Hello " + " ".join(WORDS[6:12])
        assert sanitize(text) == text


class TestCombined:
    def test_key_then_address(self):
        out = sanitize(f"suiprivkeyXyZ789 {ADDRESS}")
        assert out == f"{PRIVATE_KEY_MASK} {MASKED_ADDRESS}"
        assert "suiprivkey" not in out

    def test_keytool_table_row(self):
        row = f"│ main │ {ADDRESS} │ ed25519 │"
        assert sanitize(row) == f"│ main │ {MASKED_ADDRESS} │ ed25519 │"

    def test_plain_text_unchanged(self):
        text = "Gas budget: 10000000 MIST\nStatus: Success"
        assert sanitize(text) == text

    def test_empty(self):
        assert sanitize("") == ""


IDEMPOTENCE_SAMPLES = [
    "",
    "hello",
    ADDRESS,
    "suiprivkeyABC " + ADDRESS + " " + words(12),
    # The masked tail "beef" must not join the following words into a run.
    "0x" + "ab" * 30 + "beef " + words(11),
    words(11) + " suiprivkeyabc",
    "0x" + "a" * 63 + "0x" + "b" * 64,
    "id" + ADDRESS + "zz",
    "0x" + "c" * 130,
    words(25) + "\n" + words(12),
    '[{"alias": "main", "suiAddress": "' + ADDRESS + '"}]',
]


class TestProperties:
    @pytest.mark.parametrize("text", IDEMPOTENCE_SAMPLES)
    def test_idempotent(self, text):
        once = sanitize(text)
        assert sanitize(once) == once

    @pytest.mark.parametrize("text", IDEMPOTENCE_SAMPLES)
    def test_no_full_address_left(self, text):
        assert not ADDRESS_RE.search(sanitize(text))

    @pytest.mark.parametrize("text", IDEMPOTENCE_SAMPLES)
    def test_never_longer(self, text):
        assert len(sanitize(text)) <= len(text)

    def test_masked_tail_does_not_start_run(self):
        text = "0x" + "ab" * 30 + "beef " + words(11)
        assert sanitize(text) == "0xabab...beef " + words(11)


class TestHelpers:
    def test_mask_address(self):
        address = "0x1234567890abcdef" + "0" * 46 + "fedc"
        assert len(address) == 68
        assert mask_address(address) == "0x1234...fedc"

    @pytest.mark.parametrize("short", ["", "0x", "0x1234567"])
    def test_mask_address_short_unchanged(self, short):
        assert mask_address(short) == short

    def test_sanitize_args(self):
        assert sanitize_args(["keytool", "import", "suiprivkeyABC", ADDRESS]) == [
            "keytool",
            "import",
            "****",
            MASKED_ADDRESS,
        ]
