"""Unit tests for link groups."""

import itertools

import pytest

from laylder.links import (
    LinkPolicy,
    add_link,
    are_linked,
    canonical_links,
    check_links,
    group_of,
    groups_of,
    parse_policy,
    remove_link,
)
from laylder.schema import ComponentLink


def link(source: str, target: str) -> ComponentLink:
    return ComponentLink(source=source, target=target)


def as_sets(groups):
    return {frozenset(group) for group in groups}


class TestGroupsOf:
    """Tests for connected-component grouping."""

    @pytest.mark.unit
    def test_transitive_chain_merges(self):
        """c1-c2 and c2-c3 form a single group."""
        groups = groups_of([link("c1", "c2"), link("c2", "c3")])
        assert groups == [["c1", "c2", "c3"]]

    @pytest.mark.unit
    def test_no_links_gives_singletons(self):
        """Every unlinked id is its own group."""
        assert groups_of([], ["c1", "c2", "c3"]) == [["c1"], ["c2"], ["c3"]]

    @pytest.mark.unit
    def test_empty(self):
        assert groups_of([]) == []

    @pytest.mark.unit
    def test_each_id_in_exactly_one_group(self):
        """Groups partition the ids."""
        links = [link("a", "b"), link("c", "d"), link("b", "e")]
        groups = groups_of(links, ["a", "b", "c", "d", "e", "f"])
        flat = [cid for group in groups for cid in group]
        assert sorted(flat) == ["a", "b", "c", "d", "e", "f"]
        assert len(flat) == len(set(flat))
        assert as_sets(groups) == {
            frozenset("abe"),
            frozenset("cd"),
            frozenset("f"),
        }

    @pytest.mark.unit
    def test_independent_of_insertion_order(self):
        """Any permutation of the links yields the same groups."""
        links = [link("a", "b"), link("b", "c"), link("d", "e")]
        expected = as_sets(groups_of(links))
        for permutation in itertools.permutations(links):
            assert as_sets(groups_of(list(permutation))) == expected

    @pytest.mark.unit
    def test_reverse_pair_is_not_a_new_edge(self):
        """(b, a) after (a, b) changes nothing."""
        assert groups_of([link("a", "b"), link("b", "a")]) == [["a", "b"]]
        assert canonical_links([link("a", "b"), link("b", "a")]) == [link("a", "b")]

    @pytest.mark.unit
    def test_self_loop_ignored(self):
        """A self-link adds no edge but the id still gets a group."""
        assert groups_of([link("a", "a")], ["a"]) == [["a"]]

    @pytest.mark.unit
    def test_component_ids_drive_order(self):
        """Groups follow the order of the given ids."""
        groups = groups_of([link("c3", "c1")], ["c1", "c2", "c3"])
        assert groups == [["c1", "c3"], ["c2"]]

    @pytest.mark.unit
    def test_one_to_one_evicts_older_link(self):
        """Under one-to-one, c2-c3 replaces c1-c2."""
        groups = groups_of(
            [link("c1", "c2"), link("c2", "c3")],
            ["c1", "c2", "c3"],
            policy=LinkPolicy.ONE_TO_ONE,
        )
        assert groups == [["c1"], ["c2", "c3"]]


class TestLinkEditing:
    """Tests for add/remove under each policy."""

    @pytest.mark.unit
    def test_add_link_returns_new_list(self):
        original = [link("a", "b")]
        updated = add_link(original, "b", "c")
        assert original == [link("a", "b")]
        assert updated == [link("a", "b"), link("b", "c")]

    @pytest.mark.unit
    def test_add_duplicate_is_noop(self):
        assert add_link([link("a", "b")], "b", "a") == [link("a", "b")]

    @pytest.mark.unit
    def test_add_self_link_is_noop(self):
        assert add_link([], "a", "a") == []

    @pytest.mark.unit
    def test_one_to_one_eviction_on_both_ends(self):
        """Links touching either endpoint are evicted."""
        links = [link("a", "b"), link("c", "d")]
        updated = add_link(links, "b", "c", LinkPolicy.ONE_TO_ONE)
        assert updated == [link("b", "c")]

    @pytest.mark.unit
    def test_remove_link_either_direction(self):
        links = [link("a", "b"), link("b", "c")]
        assert remove_link(links, "b", "a") == [link("b", "c")]


class TestQueries:
    """Tests for group lookups and link checks."""

    @pytest.mark.unit
    def test_group_of_unlinked(self):
        assert group_of("z", [link("a", "b")]) == ["z"]

    @pytest.mark.unit
    def test_are_linked_transitively(self):
        links = [link("a", "b"), link("b", "c")]
        assert are_linked("a", "c", links)
        assert not are_linked("a", "d", links)

    @pytest.mark.unit
    def test_check_links(self):
        """Orphans, self-loops and duplicates are all reported."""
        problems = check_links(
            [link("a", "ghost"), link("a", "a"), link("b", "a"), link("a", "b")],
            {"a", "b"},
        )
        assert any("ghost" in p for p in problems)
        assert any("Self-loop" in p for p in problems)
        assert any("Duplicate" in p for p in problems)

    @pytest.mark.unit
    def test_check_links_clean(self):
        assert check_links([link("a", "b")], {"a", "b"}) == []

    @pytest.mark.unit
    def test_parse_policy(self):
        assert parse_policy("one_to_one") is LinkPolicy.ONE_TO_ONE
        assert parse_policy(" Transitive ") is LinkPolicy.TRANSITIVE
        with pytest.raises(ValueError):
            parse_policy("sometimes")


class TestDefaultPolicy:
    """Policy selection through the environment."""

    @pytest.mark.unit
    def test_default_is_transitive(self, clean_env):
        from laylder.links import default_policy

        assert default_policy() is LinkPolicy.TRANSITIVE

    @pytest.mark.unit
    def test_env_selects_one_to_one(self, clean_env):
        from laylder.links import default_policy

        clean_env.setenv("LAYLDER_LINK_POLICY", "one-to-one")
        assert default_policy() is LinkPolicy.ONE_TO_ONE
