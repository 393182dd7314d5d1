from typing import Callable, Iterable, List, Optional, Set, Union
import logging

from proof_tree import Formula
from proof_tree.config import CLOSED_MARK, FORMULA_SEPARATOR, TREE_INDENT


class InvalidOperationException(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ProofTreeNode:
    """A node of a proof tree.

    Holds one or more formulae. Each formula may be ticked (tried), after
    which rule selection skips it in this node. A node closes when it
    contradicts itself or one of its ancestors; the tree decides when that
    happens. A node has at most two children.
    """

    def __init__(self, formulae: Iterable[Formula]):
        self.formulae = tuple(formulae)
        self.parent: Optional["ProofTreeNode"] = None
        self.left: Optional["ProofTreeNode"] = None
        self.right: Optional["ProofTreeNode"] = None
        self._tried: Set[int] = set()
        self._closed = False

    @property
    def children(self) -> List["ProofTreeNode"]:
        return [child for child in (self.left, self.right) if child is not None]

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def contradicts(self, other: "ProofTreeNode") -> bool:
        return any(mine.contradicts(theirs) for mine in self.formulae for theirs in other.formulae)

    def get_constants(self) -> List[str]:
        result = []
        for formula in self.formulae:
            for constant in formula.get_constants():
                if constant not in result:
                    result.append(constant)
        return result

    def _open_chain(self):
        # this node and its ancestors, up to the first closed one
        current = self
        while current is not None and not current.is_closed():
            yield current
            current = current.parent

    def constants_from(self) -> List[str]:
        """Constants of this node and of every open node above it."""
        result = []
        for node in self._open_chain():
            for constant in node.get_constants():
                if constant not in result:
                    result.append(constant)
        return result

    def contains_formula(self, formula: Formula) -> bool:
        return formula in self.formulae

    def contains_formula_from(self, formula: Formula) -> bool:
        return any(node.contains_formula(formula) for node in self._open_chain())

    def tick(self, formula: Formula):
        self._tried.add(self.formulae.index(formula))

    def untick(self, formula: Formula):
        self._tried.discard(self.formulae.index(formula))

    def is_tried(self, formula: Formula) -> bool:
        return self.formulae.index(formula) in self._tried

    def close(self):
        self._closed = True

    def is_closed(self) -> bool:
        return self._closed

    def clone(self) -> "ProofTreeNode":
        """A detached copy with the same formulae, unticked and open."""
        return ProofTreeNode(self.formulae)

    def render(self, formatter: Callable[[Formula], str] = str) -> str:
        text = FORMULA_SEPARATOR.join(formatter(formula) for formula in self.formulae)
        return text + (CLOSED_MARK if self._closed else "")

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"ProofTreeNode({self.render()!r})"


class ProofTree:
    """A binary tree of ProofTreeNode objects grown from a single root.

    The tree only records its root; parent and child links live on the
    nodes, and every link change goes through add_child/remove_child.
    """

    def __init__(self, root: Union[ProofTreeNode, Iterable[Formula]]):
        self.root = root if isinstance(root, ProofTreeNode) else ProofTreeNode(root)

    # --- structure -------------------------------------------------------
    def add_child(self, parent: ProofTreeNode, child: ProofTreeNode):
        if parent.left is None:
            parent.left = child
        elif parent.right is None:
            parent.right = child
        else:
            raise InvalidOperationException(f"node {parent} already has two children")
        child.parent = parent

    def remove_child(self, parent: ProofTreeNode, child: ProofTreeNode):
        if parent.left is child:
            parent.left = None
            child.parent = None
        elif parent.right is child:
            parent.right = None
            child.parent = None

    def leaves_below(self, node: ProofTreeNode) -> List[ProofTreeNode]:
        """Open childless nodes under node, left to right."""
        result = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_closed():
                continue
            if current.is_leaf():
                result.append(current)
            else:
                stack.extend(reversed(current.children))
        return result

    def unclosed_nodes(self) -> List[ProofTreeNode]:
        """Open nodes in pre-order; nothing below a closed node is visited."""
        result = []
        stack = [self.root]
        while stack:
            current = stack.pop()
            if current.is_closed():
                continue
            result.append(current)
            stack.extend(reversed(current.children))
        return result

    def path_to_root(self, node: ProofTreeNode) -> List[ProofTreeNode]:
        result = []
        current = node
        while current is not None:
            result.append(current)
            if current is self.root:
                break
            current = current.parent
        return result

    # --- contradiction ---------------------------------------------------
    def contradiction_from(self, node: ProofTreeNode) -> bool:
        """Whether node contradicts itself or any node on its way to the root."""
        return any(node.contradicts(current) for current in self.path_to_root(node))

    def contradiction_below(self, leaf: ProofTreeNode, candidate: ProofTreeNode) -> bool:
        """Whether candidate would close if it were attached under leaf.

        candidate is never attached; the live tree is left untouched.
        """
        if candidate.contradicts(candidate):
            return True
        return any(candidate.contradicts(current) for current in self.path_to_root(leaf))

    # --- growth ----------------------------------------------------------
    def is_redundant_below(self, leaf: ProofTreeNode, template: ProofTreeNode) -> bool:
        # nothing new: every formula is already on the leaf's branch
        return all(leaf.contains_formula_from(formula) for formula in template.formulae)

    def pending_grafts(self, node: ProofTreeNode, templates: List[ProofTreeNode]):
        """The (leaf, template) pairs graft_below would attach, in order.

        A leaf whose branch already holds every formula of one template
        already satisfies that alternative and gets none of them.
        """
        result = []
        for leaf in self.leaves_below(node):
            if any(self.is_redundant_below(leaf, template) for template in templates):
                continue
            result.extend((leaf, template) for template in templates)
        return result

    def graft_below(self, node: ProofTreeNode, templates: List[ProofTreeNode]) -> bool:
        """Attach a copy of every template under every open leaf below node.

        Leaves where some template adds nothing are skipped, and copies
        that contradict their branch are closed straight away. Returns
        whether the tree changed.
        """
        changed = False
        for leaf, template in self.pending_grafts(node, templates):
            child = template.clone()
            self.add_child(leaf, child)
            if self.contradiction_from(child):
                child.close()
                logging.debug(f"tree:close:node={child}")
            changed = True
        return changed

    # --- queries ---------------------------------------------------------
    def closes(self) -> bool:
        return self.closes_from(self.root)

    def closes_from(self, node: ProofTreeNode) -> bool:
        """Whether every path from node down to a leaf meets a closed node."""
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_closed():
                continue
            if current.is_leaf():
                return False
            stack.extend(current.children)
        return True

    def size(self) -> int:
        count = 0
        stack = [self.root]
        while stack:
            current = stack.pop()
            count += 1
            stack.extend(current.children)
        return count

    def render(self, formatter: Callable[[Formula], str] = str) -> str:
        lines = []
        stack = [(self.root, 0)]
        while stack:
            current, level = stack.pop()
            lines.append(TREE_INDENT * level + current.render(formatter))
            stack.extend((child, level + 1) for child in reversed(current.children))
        return "".join(line + "\n" for line in lines)

    def __str__(self):
        return self.render()
