"""Unit tests for text normalization."""
import pytest

from order_intake.parsing.text_normalizer import normalize_delivery_method, normalize_text

NBSP = chr(0x00A0)
ZWSP = chr(0x200B)
WORD_JOINER = chr(0x2060)
BOM = chr(0xFEFF)
SOFT_HYPHEN = chr(0x00AD)


class TestNormalizeText:
    def test_converts_crlf_and_cr_to_lf(self):
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_replaces_nbsp_with_space(self):
        assert normalize_text(f"Nama{NBSP}Pemesan: Hera") == "Nama Pemesan: Hera"

    def test_removes_invisible_characters(self):
        raw = f"•{ZWSP}{WORD_JOINER} 80 x Dawet{BOM}{SOFT_HYPHEN}"
        assert normalize_text(raw) == "• 80 x Dawet"

    def test_collapses_spaces_and_tabs_but_keeps_newlines(self):
        assert normalize_text("a  \t b\n\nc") == "a b\n\nc"

    def test_strips_outer_whitespace(self):
        assert normalize_text("  \n hello \n ") == "hello"

    @pytest.mark.parametrize("value", [None, "", 42])
    def test_non_string_or_empty_returns_empty(self, value):
        assert normalize_text(value) == ""

    def test_idempotent(self):
        raw = f"  Nama:{NBSP}Budi\r\n{ZWSP}Alamat:\t Jl.  A  \r\n"
        once = normalize_text(raw)
        assert normalize_text(once) == once


class TestNormalizeDeliveryMethod:
    @pytest.mark.parametrize("raw, expected", [
        ("pickup", "Pickup"),
        ("PICKUP", "Pickup"),
        ("grabexpress", "GrabExpress"),
        ("Grab Express", "GrabExpress"),
        ("custom", "Custom"),
        ("  Gojek  ", "Gojek"),
        ("", "-"),
        (None, "-"),
    ])
    def test_standardizes_known_methods(self, raw, expected):
        assert normalize_delivery_method(raw) == expected
