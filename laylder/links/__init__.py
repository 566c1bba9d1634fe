"""Link-group resolver for cross-breakpoint component identity."""

from .lib import (
    LinkPolicy,
    add_link,
    are_linked,
    canonical_links,
    check_links,
    default_policy,
    group_of,
    groups_of,
    parse_policy,
    remove_link,
)

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
