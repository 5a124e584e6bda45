"""Tests for the S-expression parser, tree helpers and printer."""

from __future__ import annotations

import pytest

from pcb_review.models.errors import SExprParseError, UnclosedListError, UnclosedStringError
from pcb_review.parsers.sexpr import (
    atom_str,
    convert_atom,
    dumps,
    find_elements,
    get_property,
    get_value,
    get_xy,
    parse_sexp,
    tag_of,
    to_float,
    to_int,
)

SYMBOL_SNIPPET = """\
(kicad_sch (version 20230121)
  (symbol (lib_id "Device:R") (at 100 50 90) (unit 1)
    (property "Reference" "R1" (at 100 48 0))
    (property "Value" "10k" (at 100 52 0))
  )
  (symbol (lib_id "Device:C") (at 120.5 50 0)
    (property "Reference" "C1" (at 120 48 0))
  )
)
"""


class TestParse:
    def test_nested_lists(self):
        assert parse_sexp("(a (b c) (d (e)))") == ["a", ["b", "c"], ["d", ["e"]]]

    def test_quoted_string(self):
        assert parse_sexp('(property "Reference" "U1")') == ["property", "Reference", "U1"]

    def test_quoted_string_keeps_parens_and_spaces(self):
        assert parse_sexp('(name "a (b) c")') == ["name", "a (b) c"]

    def test_escaped_quote(self):
        assert parse_sexp(r'(text "say \"hi\"")') == ["text", 'say "hi"']

    def test_backslash_takes_next_char_literally(self):
        assert parse_sexp(r'(text "a\nb")') == ["text", "anb"]

    def test_empty_input_returns_none(self):
        assert parse_sexp("") is None
        assert parse_sexp("  \n\t ") is None

    def test_only_first_expression(self):
        assert parse_sexp("(a) (b)") == ["a"]

    def test_empty_list(self):
        assert parse_sexp("()") == []

    def test_bare_atom(self):
        assert parse_sexp("hello") == "hello"


class TestNumericAtoms:
    def test_integer(self):
        value = parse_sexp("3")
        assert value == 3
        assert isinstance(value, int)

    def test_float(self):
        value = parse_sexp("3.0")
        assert value == 3.0
        assert isinstance(value, float)

    def test_partial_number_stays_string(self):
        assert parse_sexp("3.5abc") == "3.5abc"

    @pytest.mark.parametrize("text,expected", [
        ("-2", -2),
        ("+7", 7),
        ("-0.5", -0.5),
        (".25", 0.25),
        ("1.5e3", 1500.0),
    ])
    def test_signed_and_exponent(self, text, expected):
        assert convert_atom(text) == expected

    @pytest.mark.parametrize("text", ["1e3", "12abc", "0x10", "1.2.3", "F.Cu", "-", "+"])
    def test_non_numeric_atoms(self, text):
        assert convert_atom(text) == text

    def test_quoted_number_stays_string(self):
        assert parse_sexp('(net 1 "3")') == ["net", 1, "3"]

    def test_uuid_like_atom_is_string(self):
        tree = parse_sexp("(tstamp 0b1f9a52-0001-4c1e-9d0e-000000000001)")
        assert tree == ["tstamp", "0b1f9a52-0001-4c1e-9d0e-000000000001"]


class TestParseErrors:
    def test_unclosed_list(self):
        with pytest.raises(UnclosedListError) as exc_info:
            parse_sexp("(kicad_pcb (net 1 GND)")
        assert exc_info.value.details["offset"] == 0

    def test_unclosed_string(self):
        with pytest.raises(UnclosedStringError):
            parse_sexp('(property "Reference)')

    def test_stray_close_paren(self):
        with pytest.raises(SExprParseError):
            parse_sexp(")")

    def test_errors_share_base_class(self):
        assert issubclass(UnclosedListError, SExprParseError)
        assert issubclass(UnclosedStringError, SExprParseError)


class TestHelpers:
    def test_tag_of(self):
        assert tag_of(["net", 1, "GND"]) == "net"
        assert tag_of([1, 2]) == ""
        assert tag_of("atom") == ""
        assert tag_of([]) == ""

    def test_to_float_and_to_int(self):
        assert to_float(2) == 2.0
        assert to_float("1.5") == 1.5
        assert to_float("abc") == 0.0
        assert to_float(None, 7.0) == 7.0
        assert to_int(3.9) == 3
        assert to_int("12") == 12
        assert to_int(["list"]) == 0

    def test_atom_str(self):
        assert atom_str(10.0) == "10"
        assert atom_str(0.5) == "0.5"
        assert atom_str(3) == "3"
        assert atom_str(None) == ""

    def test_find_elements_recursive(self):
        tree = parse_sexp(SYMBOL_SNIPPET)
        symbols = find_elements(tree, "symbol")
        assert len(symbols) == 2
        assert len(find_elements(tree, "property")) == 3

    def test_get_value(self):
        tree = parse_sexp(SYMBOL_SNIPPET)
        symbol = find_elements(tree, "symbol")[0]
        assert get_value(symbol, "lib_id") == "Device:R"
        assert get_value(symbol, "missing") is None

    def test_get_property(self):
        tree = parse_sexp(SYMBOL_SNIPPET)
        first, second = find_elements(tree, "symbol")
        assert get_property(first, "Value") == "10k"
        assert get_property(second, "Value") is None

    def test_get_xy(self):
        tree = parse_sexp(SYMBOL_SNIPPET)
        first, second = find_elements(tree, "symbol")
        assert get_xy(first) == (100.0, 50.0, 90.0)
        assert get_xy(second) == (120.5, 50.0, 0.0)
        assert get_xy(["symbol"]) == (0.0, 0.0, None)


class TestDumps:
    def test_reparse_preserves_structure(self):
        tree = parse_sexp(SYMBOL_SNIPPET)
        assert parse_sexp(dumps(tree)) == tree

    def test_reparse_preserves_atom_kinds(self):
        tree = parse_sexp('(at 1 2.0 "3" 4.5abc -0.25)')
        again = parse_sexp(dumps(tree))
        assert again == tree
        assert [type(v) for v in again] == [str, int, float, str, str, float]

    def test_strings_that_look_numeric_are_quoted(self):
        assert dumps(["net", 1, "3"]) == '(net 1 "3")'

    def test_identifiers_bare_other_strings_quoted(self):
        assert dumps(["layer", "F.Cu", "signal", "_x1", ""]) == '(layer "F.Cu" signal _x1 "")'

    def test_escaping(self):
        text = dumps(["text", 'a "b" \\ c'])
        assert parse_sexp(text) == ["text", 'a "b" \\ c']

    def test_float_formatting(self):
        assert dumps(1.0) == "1.0"
        assert parse_sexp(dumps(1e20)) == 1e20

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            dumps(True)
