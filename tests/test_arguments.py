"""Tests for the Argument variant (Literal | Reference) and its parsing."""

import pytest

from ledgerplan.schemas import Literal, Reference, parse_argument, parse_arguments, symbol_for


class TestParseArgument:
    """Tests for parse_argument."""

    def test_dollar_string_is_reference(self):
        assert parse_argument("$Admin") == Reference("$Admin")

    def test_plain_string_is_literal(self):
        assert parse_argument("Admin") == Literal("Admin")

    def test_numbers_and_lists_are_literals(self):
        assert parse_argument(42) == Literal(42)
        assert parse_argument([1, 2]) == Literal([1, 2])

    def test_explicit_ref_mapping(self):
        assert parse_argument({"ref": "Shipper"}) == Reference("$Shipper")

    def test_explicit_literal_keeps_dollar_string(self):
        assert parse_argument({"literal": "$5"}) == Literal("$5")

    def test_other_mappings_are_literals(self):
        assert parse_argument({"a": 1, "b": 2}) == Literal({"a": 1, "b": 2})

    def test_empty_ref_rejected(self):
        with pytest.raises(ValueError):
            parse_argument({"ref": ""})

    def test_already_parsed_passes_through(self):
        ref = Reference("$X")
        assert parse_argument(ref) is ref


class TestParseArguments:
    """Tests for parse_arguments."""

    def test_none_is_empty(self):
        assert parse_arguments(None) == ()

    def test_scalar_is_wrapped(self):
        assert parse_arguments("$Shipper") == (Reference("$Shipper"),)

    def test_order_preserved(self):
        assert parse_arguments(["$Admin", 1, "x"]) == (Reference("$Admin"), Literal(1), Literal("x"))


class TestReference:
    """Tests for Reference."""

    def test_name_strips_marker(self):
        assert Reference("$CakeFactory").name == "CakeFactory"

    @pytest.mark.parametrize("bad", ["Admin", "$", ""])
    def test_rejects_malformed_symbol(self, bad):
        with pytest.raises(ValueError):
            Reference(bad)

    def test_literal_dollar_string_serializes_explicitly(self):
        assert Literal("$5").to_plan_value() == {"literal": "$5"}
        assert Literal("abc").to_plan_value() == "abc"


class TestSymbolFor:
    def test_adds_marker_once(self):
        assert symbol_for("Admin") == "$Admin"
        assert symbol_for("$Admin") == "$Admin"
