"""
Tests for percent-encoding.
"""

import pytest

from uritpl.escape import (
    CLASSES,
    RESERVED_CHARS,
    UNRESERVED_CHARS,
    Mask,
    byte_class,
    escape,
)


class TestClassificationTable:

    def test_table_size(self):
        """The table covers every byte"""
        assert len(CLASSES) == 0x100

    def test_unreserved(self):
        for c in UNRESERVED_CHARS:
            assert byte_class(ord(c)) == Mask.UNRESERVED, c

    def test_reserved(self):
        for c in RESERVED_CHARS:
            assert byte_class(ord(c)) == Mask.RESERVED, c

    def test_everything_else_disallowed(self):
        for b in range(0x100):
            c = chr(b)
            if c in UNRESERVED_CHARS or c in RESERVED_CHARS:
                continue
            assert byte_class(b) == Mask.DISALLOWED, hex(b)


class TestEscape:

    def test_zero_mask_is_identity(self):
        """Mask 0 never transforms the input"""
        s = "Hello World!%{}"
        assert escape(s, 0) is s
        assert escape(s, Mask.NONE) is s

    def test_no_match_returns_same_object(self):
        """Nothing to encode: the very same string comes back"""
        s = "Hello.world~"
        assert escape(s, Mask.DISALLOWED | Mask.RESERVED) is s

    @pytest.mark.parametrize("unescaped,mask,expected", [
        ("Hello World!", Mask.DISALLOWED | Mask.RESERVED, "Hello%20World%21"),
        ("Hello World!", Mask.DISALLOWED, "Hello%20World!"),
        (
            "Did you ever hear the tragedy of Darth Plagueis The Wise? I thought not. "
            "It’s not a story the Jedi would tell you.",
            Mask.DISALLOWED | Mask.RESERVED,
            "Did%20you%20ever%20hear%20the%20tragedy%20of%20Darth%20Plagueis%20The%20Wise%3F"
            "%20I%20thought%20not.%20It%E2%80%99s%20not%20a%20story%20the%20Jedi%20would%20tell%20you.",
        ),
        ("50%", Mask.DISALLOWED, "50%25"),
        ("a-b", Mask.UNRESERVED, "%61%2D%62"),
        ("\x1f:", Mask.DISALLOWED | Mask.RESERVED, "%1F%3A"),
    ])
    def test_escape(self, unescaped, mask, expected):
        assert escape(unescaped, mask) == expected

    def test_output_length(self):
        """Every encoded byte adds exactly two characters"""
        s = "a b/c"
        escaped = escape(s, Mask.DISALLOWED | Mask.RESERVED)
        assert escaped == "a%20b%2Fc"
        assert len(escaped) == len(s) + 2 * 2

    def test_unmasked_non_ascii_passes_through(self):
        """Non-ASCII bytes are disallowed, so a reserved-only mask leaves them alone"""
        assert escape("é /", Mask.RESERVED) == "é %2F"

    def test_non_ascii_encoded_as_utf8(self):
        assert escape("é", Mask.DISALLOWED) == "%C3%A9"

    def test_surrogate_escaped_byte(self):
        """Raw bytes carried as surrogates are encoded back to that byte"""
        assert escape("\udcff", Mask.DISALLOWED) == "%FF"

    def test_lone_high_surrogate(self):
        """Surrogates outside the escape range are encoded as their UTF-8 bytes"""
        assert escape("a\ud83db", Mask.DISALLOWED) == "a%ED%A0%BDb"

    def test_lone_surrogate_survives_unmasked(self):
        assert escape("\ud83d/", Mask.RESERVED) == "\ud83d%2F"
