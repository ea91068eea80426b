"""Tests for netlist/union_find.py - DisjointSet."""

from netlist.union_find import DisjointSet


class TestDisjointSet:
    def test_new_key_is_its_own_representative(self):
        dsu = DisjointSet()
        dsu.add("R1.1")
        assert dsu.find("R1.1") == "R1.1"

    def test_find_interns_unseen_keys(self):
        dsu = DisjointSet()
        assert dsu.find("X.1") == "X.1"
        assert "X.1" in dsu
        assert len(dsu) == 1

    def test_add_is_idempotent(self):
        dsu = DisjointSet()
        first = dsu.add("a")
        assert dsu.add("a") == first
        assert len(dsu) == 1

    def test_union_attaches_first_root_under_second(self):
        dsu = DisjointSet()
        assert dsu.union("a", "b") == "b"
        assert dsu.find("a") == "b"

    def test_union_is_transitive(self):
        dsu = DisjointSet()
        dsu.union("a", "b")
        dsu.union("c", "d")
        dsu.union("b", "c")
        assert dsu.connected("a", "d")
        assert len({dsu.find(k) for k in "abcd"}) == 1

    def test_union_same_class_is_noop(self):
        dsu = DisjointSet()
        dsu.union("a", "b")
        rep = dsu.find("a")
        assert dsu.union("a", "b") == rep

    def test_separate_classes_stay_apart(self):
        dsu = DisjointSet()
        dsu.union("a", "b")
        dsu.union("c", "d")
        assert not dsu.connected("a", "c")

    def test_long_chain_resolves(self):
        dsu = DisjointSet()
        keys = [f"k{i}" for i in range(500)]
        for a, b in zip(keys, keys[1:]):
            dsu.union(a, b)
        assert dsu.find(keys[0]) == dsu.find(keys[-1])

    def test_classes_groups_in_interned_order(self):
        dsu = DisjointSet()
        for key in ("a", "b", "c", "d"):
            dsu.add(key)
        dsu.union("a", "c")
        groups = dsu.classes()
        assert sorted(groups.values()) == [["a", "c"], ["b"], ["d"]]
        assert groups[dsu.find("a")] == ["a", "c"]
