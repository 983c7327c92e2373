"""Tests for ResolutionEnvironment."""

import pytest

from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.errors import UnresolvedReferenceError
from ledgerplan.schemas import Literal, Reference


class TestSeed:
    """Tests for seeding role bindings."""

    def test_keys_get_marker(self):
        env = ResolutionEnvironment({"Admin": "0xAAA", "$Operator": "0xBBB"})
        assert env.lookup("$Admin") == "0xAAA"
        assert env.lookup("Operator") == "0xBBB"
        assert "$Admin" in env
        assert len(env) == 2

    def test_seeded_roles_are_not_deployed(self):
        env = ResolutionEnvironment({"Admin": "0xAAA"})
        assert not env.is_deployed("Admin")
        assert env.deployed_symbols() == []


class TestResolve:
    """Tests for resolve / resolve_all."""

    def test_literal_passes_through(self):
        env = ResolutionEnvironment()
        assert env.resolve(Literal([1, 2])) == [1, 2]

    def test_reference_resolves(self):
        env = ResolutionEnvironment({"Admin": "0xAAA"})
        assert env.resolve(Reference("$Admin")) == "0xAAA"

    def test_missing_reference_raises(self):
        env = ResolutionEnvironment({"Admin": "0xAAA"})
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            env.resolve(Reference("$Missing"), component="A")
        assert exc_info.value.symbol == "$Missing"
        assert exc_info.value.component == "A"

    def test_resolve_all_in_order(self):
        env = ResolutionEnvironment({"Admin": "0xAAA", "Operator": "0xBBB"})
        values = env.resolve_all([Reference("$Operator"), Literal(3), Reference("$Admin")])
        assert values == ["0xBBB", 3, "0xAAA"]

    def test_resolve_rejects_raw_values(self):
        with pytest.raises(TypeError):
            ResolutionEnvironment().resolve("$Admin")


class TestRecord:
    """Tests for record and ordering."""

    def test_record_marks_deployed(self):
        env = ResolutionEnvironment({"Admin": "0xAAA"})
        env.record("$A", "0x01")
        assert env.is_deployed("A")
        assert env.resolve(Reference("$A")) == "0x01"

    def test_snapshot_is_insertion_ordered(self):
        env = ResolutionEnvironment({"Admin": "0xAAA", "Operator": "0xBBB"})
        env.record("$Z", "0x01")
        env.record("$A", "0x02")
        assert env.snapshot_ordered() == [
            ("$Admin", "0xAAA"),
            ("$Operator", "0xBBB"),
            ("$Z", "0x01"),
            ("$A", "0x02"),
        ]
        assert list(env) == ["$Admin", "$Operator", "$Z", "$A"]

    def test_overwrite_keeps_position(self):
        env = ResolutionEnvironment()
        env.record("$A", "0x01")
        env.record("$B", "0x02")
        env.record("$A", "0x03")
        assert env.snapshot_ordered() == [("$A", "0x03"), ("$B", "0x02")]
        assert env.deployed_symbols() == ["$A", "$B"]

    def test_environments_are_independent(self):
        first = ResolutionEnvironment({"Admin": "0xAAA"})
        second = ResolutionEnvironment({"Admin": "0xAAA"})
        first.record("$A", "0x01")
        assert "$A" not in second
