#!/usr/bin/env python3
"""Tests for EntityIndex."""

from fleetiq import EntityIndex, Vehicle


class TestEntityIndex:
    """Tests for id lookups over a collection."""

    def test_get_by_id(self):
        index = EntityIndex([Vehicle("veh-1"), Vehicle("veh-2")])
        assert index.get("veh-2").id == "veh-2"
        assert index.get("veh-3") is None
        assert index.get(None) is None

    def test_membership_and_length(self):
        index = EntityIndex([Vehicle("veh-1"), Vehicle("veh-2")])
        assert "veh-1" in index
        assert "veh-3" not in index
        assert len(index) == 2

    def test_iterates_in_original_order(self):
        records = [Vehicle("b"), Vehicle("a")]
        assert [v.id for v in EntityIndex(records)] == ["b", "a"]

    def test_duplicate_ids_last_wins(self):
        index = EntityIndex([Vehicle("veh-1", rego="OLD"), Vehicle("veh-1", rego="NEW")])
        assert index.get("veh-1").rego == "NEW"
        assert len(index) == 2

    def test_custom_key(self):
        index = EntityIndex([Vehicle("veh-1", rego="123ABC")], key=lambda v: v.rego)
        assert index.get("123ABC").id == "veh-1"
        assert list(index.keys()) == ["123ABC"]

    def test_empty(self):
        index = EntityIndex()
        assert len(index) == 0
        assert index.get("anything") is None
