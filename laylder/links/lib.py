"""Link groups: equivalence classes over component links.

A link asserts that two component ids render the same logical element
under different breakpoints. The connected components of the undirected
link graph are link groups.

Two insertion policies exist and are never mixed:

- ``LinkPolicy.TRANSITIVE``: every link is kept, chains merge freely.
- ``LinkPolicy.ONE_TO_ONE``: a node holds at most one link. A new link
  touching an already-linked node evicts the older link.
"""

from collections.abc import Iterable
from enum import Enum

from laylder.config import EnvVar, get_environment
from laylder.core.log import get_logger
from laylder.schema import ComponentLink

logger = get_logger("links")


class LinkPolicy(str, Enum):
    """How new links interact with existing ones."""

    TRANSITIVE = "transitive"
    ONE_TO_ONE = "one-to-one"


def parse_policy(value: LinkPolicy | str) -> LinkPolicy:
    """Resolve a policy from its value, accepting ``one_to_one`` spelling too.

    Raises:
        ValueError: If ``value`` names no policy.
    """
    if isinstance(value, LinkPolicy):
        return value
    normalized = value.strip().lower().replace("_", "-")
    try:
        return LinkPolicy(normalized)
    except ValueError:
        options = ", ".join(p.value for p in LinkPolicy)
        raise ValueError(f"Unknown link policy '{value}'. Expected one of: {options}") from None


def default_policy() -> LinkPolicy:
    """Policy configured by LAYLDER_LINK_POLICY (transitive when unset)."""
    return parse_policy(get_environment(EnvVar.LAYLDER_LINK_POLICY))


def add_link(
    links: Iterable[ComponentLink],
    source: str,
    target: str,
    policy: LinkPolicy = LinkPolicy.TRANSITIVE,
) -> list[ComponentLink]:
    """Return a new link list with ``source`` <-> ``target`` added.

    Self-links and links already present in either direction are no-ops.
    """
    current = list(links)
    if source == target:
        logger.debug(f"Ignoring self-link on '{source}'")
        return current

    new_key = frozenset((source, target))
    if any(link.key() == new_key for link in current):
        return current

    if policy is LinkPolicy.ONE_TO_ONE:
        kept = [
            link
            for link in current
            if not (link.touches(source) or link.touches(target))
        ]
        if len(kept) != len(current):
            logger.debug(
                f"Evicted {len(current) - len(kept)} link(s) for {source} <-> {target}"
            )
        current = kept

    current.append(ComponentLink(source=source, target=target))
    return current


def remove_link(
    links: Iterable[ComponentLink], source: str, target: str
) -> list[ComponentLink]:
    """Return a new link list without ``source`` <-> ``target`` (either direction)."""
    key = frozenset((source, target))
    return [link for link in links if link.key() != key]


def canonical_links(
    links: Iterable[ComponentLink],
    policy: LinkPolicy = LinkPolicy.TRANSITIVE,
) -> list[ComponentLink]:
    """Replay ``links`` in order through ``add_link`` under ``policy``.

    Drops self-loops and duplicates; under ONE_TO_ONE also applies eviction.
    """
    result: list[ComponentLink] = []
    for link in links:
        result = add_link(result, link.source, link.target, policy)
    return result


class _UnionFind:
    """Disjoint sets with path compression and union by size."""

    def __init__(self) -> None:
        self.parent: dict[str, str] = {}
        self.size: dict[str, int] = {}

    def add(self, node: str) -> None:
        if node not in self.parent:
            self.parent[node] = node
            self.size[node] = 1

    def find(self, node: str) -> str:
        root = node
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[node] != root:
            self.parent[node], node = root, self.parent[node]
        return root

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]


def groups_of(
    links: Iterable[ComponentLink],
    component_ids: Iterable[str] = (),
    policy: LinkPolicy = LinkPolicy.TRANSITIVE,
) -> list[list[str]]:
    """Connected components of the link graph.

    Every id in ``component_ids`` that appears in no link forms a singleton
    group. Nodes are ordered by first appearance: ``component_ids`` first,
    then link endpoints in link order. Groups are ordered by their first
    member, and members keep node order, so the result does not depend on
    the direction of any link.

    Args:
        links: Component links.
        component_ids: Ids that must each land in some group.
        policy: Insertion policy applied to ``links`` before grouping.

    Returns:
        Groups of component ids; every id appears in exactly one group.

    Example:
        >>> links = [ComponentLink(source="c1", target="c2"),
        ...          ComponentLink(source="c2", target="c3")]
        >>> groups_of(links, ["c1", "c2", "c3", "c4"])
        [['c1', 'c2', 'c3'], ['c4']]
    """
    edges = canonical_links(links, policy)

    order: dict[str, int] = {}
    for component_id in component_ids:
        order.setdefault(component_id, len(order))
    for link in edges:
        order.setdefault(link.source, len(order))
        order.setdefault(link.target, len(order))

    sets = _UnionFind()
    for node in order:
        sets.add(node)
    for link in edges:
        sets.union(link.source, link.target)

    grouped: dict[str, list[str]] = {}
    for node in order:
        grouped.setdefault(sets.find(node), []).append(node)
    return list(grouped.values())


def group_of(
    component_id: str,
    links: Iterable[ComponentLink],
    policy: LinkPolicy = LinkPolicy.TRANSITIVE,
) -> list[str]:
    """Group containing ``component_id`` (just itself when unlinked)."""
    for group in groups_of(links, [component_id], policy):
        if component_id in group:
            return group
    return [component_id]


def are_linked(
    a: str,
    b: str,
    links: Iterable[ComponentLink],
    policy: LinkPolicy = LinkPolicy.TRANSITIVE,
) -> bool:
    """True if ``a`` and ``b`` share a link group, directly or transitively."""
    return b in group_of(a, links, policy)


def check_links(links: Iterable[ComponentLink], valid_ids: Iterable[str]) -> list[str]:
    """Human-readable problems with a link list.

    Reports orphaned endpoints, self-loops and duplicate links (either
    direction), each prefixed with the link's index.
    """
    valid = set(valid_ids)
    links = list(links)
    problems: list[str] = []

    for index, link in enumerate(links):
        if link.source not in valid:
            problems.append(f'Link {index}: Source component "{link.source}" does not exist')
        if link.target not in valid:
            problems.append(f'Link {index}: Target component "{link.target}" does not exist')

    for index, link in enumerate(links):
        if link.source == link.target:
            problems.append(f"Link {index}: Self-loop detected ({link.source} -> {link.source})")

    seen: set[frozenset[str]] = set()
    for index, link in enumerate(links):
        key = link.key()
        if key in seen:
            problems.append(f"Link {index}: Duplicate link ({link.source} <-> {link.target})")
        seen.add(key)

    return problems


__all__ = [
    "LinkPolicy",
    "parse_policy",
    "default_policy",
    "add_link",
    "remove_link",
    "canonical_links",
    "groups_of",
    "group_of",
    "are_linked",
    "check_links",
]
