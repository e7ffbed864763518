"""Build the nested family tree from the flat member list."""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from ..models import Member, TreeNode

log = logging.getLogger(__name__)


def _index(members: Sequence[Member]) -> Dict[str, Member]:
    # First record with a given id wins, like a linear find would.
    index: Dict[str, Member] = {}
    for m in members:
        index.setdefault(m.id, m)
    return index


def _build(member_id: str, index: Dict[str, Member], level: int, path: FrozenSet[str]) -> Optional[TreeNode]:
    if member_id in path:
        log.debug("Member %s is its own ancestor; branch dropped", member_id)
        return None
    member = index.get(member_id)
    if member is None:
        return None

    spouse = index.get(member.spouse_id) if member.spouse_id else None

    path = path | {member_id}
    children = []
    for child_id in member.children_ids:
        child = _build(child_id, index, level + 1, path)
        if child is not None:
            children.append(child)

    return TreeNode(member=member, spouse=spouse, children=tuple(children), level=level)


def build_tree(member_id: str, members: Sequence[Member], level: int = 0) -> Optional[TreeNode]:
    """
    Build the subtree rooted at `member_id`.

    Missing ids (the root, a spouse or a child) are not errors: the link is
    simply dropped, and an unresolved root yields None. A member reached again
    along its own descendant path ends that branch.

    Args:
        member_id: id of the member to use as subtree root
        members: the full flat member list
        level: generation depth assigned to the returned node

    Returns:
        The TreeNode, or None when `member_id` does not resolve.
    """
    return _build(str(member_id), _index(members), level, frozenset())


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Pre-order walk of a built tree."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def depth_mismatches(root: TreeNode) -> List[Tuple[Member, int]]:
    """Members whose stored `depth` differs from the computed level."""
    return [(n.member, n.level) for n in iter_nodes(root) if n.member.depth != n.level]


def relationship_label(depth: int) -> str:
    """child / grandchild / great-grandchild ... for a generation distance."""
    if depth <= 0:
        return "root"
    if depth == 1:
        return "child"
    return "great-" * (depth - 2) + "grandchild"
