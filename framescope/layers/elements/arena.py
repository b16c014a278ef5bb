"""
Reference Arena - Selector paths for the references a test still holds.

Every browser scope and element collection found during a run gets one
node; the elements of a collection share their collection's node. A node
stores only its own selector fragment, its parent node and the scope its
elements live in, so full selectors are rebuilt by walking parents.

The arena indexes nodes weakly. Wrappers own their node and each node
owns its parent, so a lookup chain lives exactly as long as some wrapper
at its end is referenced.
"""

import itertools
import weakref
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from framescope.core.scope import ScopeDescriptor


@dataclass(frozen=True, eq=False)
class ReferenceNode:
    """One step of a selector path."""
    node_id: int
    selector: str
    parent: Optional["ReferenceNode"]
    scope: "ScopeDescriptor"

    @property
    def parent_id(self) -> Optional[int]:
        return self.parent.node_id if self.parent is not None else None


class ReferenceArena:
    """Weak index of the live reference nodes of one run."""

    def __init__(self):
        self._nodes: "weakref.WeakValueDictionary[int, ReferenceNode]" = weakref.WeakValueDictionary()
        self._ids = itertools.count()

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, selector: Optional[str], parent: Optional[ReferenceNode], scope: "ScopeDescriptor") -> ReferenceNode:
        """
        Register a node under ``parent`` and return it.

        The caller must keep the returned node referenced; the arena does not.

        Raises:
            KeyError: if ``parent`` does not belong to this arena.
        """
        if parent is not None and self._nodes.get(parent.node_id) is not parent:
            raise KeyError(f"Unknown parent reference: {parent.node_id}")
        node = ReferenceNode(next(self._ids), selector or "", parent, scope)
        self._nodes[node.node_id] = node
        return node

    def get(self, node_id: int) -> ReferenceNode:
        return self._nodes[node_id]

    def lineage(self, node_id: int) -> List[ReferenceNode]:
        """Nodes from the root down to ``node_id``."""
        chain = []
        node: Optional[ReferenceNode] = self._nodes[node_id]
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def full_selector(self, node_id: int) -> str:
        """Root-first, space-joined selector fragments; empty ones are skipped."""
        return " ".join(
            node.selector.strip() for node in self.lineage(node_id) if node.selector.strip()
        )
