from typing import Callable, List, NamedTuple, Optional
import logging

import proof_tree as fol
from proof_tree import (
    Formula, NEGATION, DISJUNCTION, CONJUNCTION, IFTHEN, IFF, FORALL, EXISTS,
    is_universal_operator, is_existential_operator,
)
from proof_tree.config import TERM_LETTERS
from proof_tree.tableau import ProofTree, ProofTreeNode

Preference = Callable[[ProofTree, ProofTreeNode, Formula], bool]


class ConstantsExhaustedException(Exception):
    def __init__(self, message="no unused term letter left for a new constant"):
        super().__init__(message)
        self.message = message


class Expansion(NamedTuple):
    branches: List[ProofTreeNode]
    tick: bool


_NO_EXPANSION = Expansion([], False)


def _inner_operator(formula: Formula) -> str:
    return formula.major_operands()[0].major_operator()


# --- rule application ----------------------------------------------------
def _visible_constants(tree: ProofTree, node: ProofTreeNode) -> List[str]:
    result = node.constants_from()
    for leaf in tree.leaves_below(node):
        for constant in leaf.constants_from():
            if constant not in result:
                result.append(constant)
    return result


def new_constant(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> str:
    """First term letter unused on every branch through node and in formula."""
    taken = set(_visible_constants(tree, node))
    # covers the variables formula binds, so the new constant is never captured
    taken.update(ch for token in formula.tokens for ch in token)
    for letter in TERM_LETTERS:
        if letter not in taken:
            return letter
    raise ConstantsExhaustedException(f"no unused term letter left to instantiate {formula}")


def _universal(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> Expansion:
    variable = formula.quantifier_variable()
    body = formula.major_operands()[0]
    leaves = tree.leaves_below(node)
    if not leaves:
        return _NO_EXPANSION
    # a constant the body quantifies over would be captured
    bound = body.bound_variables()
    instances = []
    for leaf in leaves:
        for constant in leaf.constants_from():
            if constant in bound:
                continue
            instance = body.substitute(variable, constant)
            if instance not in instances:
                instances.append(instance)
    if not instances:
        instances.append(body.substitute(variable, new_constant(tree, node, formula)))
    # stays unticked so later constants get their instances too
    return Expansion([ProofTreeNode(instances)], False)


def _existential(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> Expansion:
    if not tree.leaves_below(node):
        return _NO_EXPANSION
    variable = formula.quantifier_variable()
    body = formula.major_operands()[0]
    instance = body.substitute(variable, new_constant(tree, node, formula))
    return Expansion([ProofTreeNode([instance])], True)


def _negated(formula: Formula) -> Expansion:
    inner = formula.major_operands()[0]
    operator = inner.major_operator()
    operands = inner.major_operands()
    if is_universal_operator(operator) or is_existential_operator(operator):
        dual = EXISTS if operator[:1] == FORALL else FORALL
        rewritten = Formula((dual + operator[1:], NEGATION) + operands[0].tokens)
        return Expansion([ProofTreeNode([rewritten])], True)
    match operator:
        case fol.DISJUNCTION:
            branches = [[operands[0].get_negation(), operands[1].get_negation()]]
        case fol.CONJUNCTION:
            branches = [[operands[0].get_negation()], [operands[1].get_negation()]]
        case fol.IFTHEN:
            branches = [[operands[0], operands[1].get_negation()]]
        case fol.IFF:
            branches = [
                [operands[0], operands[1].get_negation()],
                [operands[0].get_negation(), operands[1]],
            ]
        case fol.NEGATION:
            branches = [[operands[0]]]
        case _:
            return _NO_EXPANSION
    return Expansion([ProofTreeNode(branch) for branch in branches], True)


def expand(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> Expansion:
    """Work out the branches the tree rule for formula would add below node.

    Nothing is changed: the caller ticks and grafts. Atoms have no rule and
    give an empty expansion.
    """
    operator = formula.major_operator()
    operands = formula.major_operands()
    if is_universal_operator(operator):
        return _universal(tree, node, formula)
    if is_existential_operator(operator):
        return _existential(tree, node, formula)
    match operator:
        case fol.DISJUNCTION:
            branches = [[operands[0]], [operands[1]]]
        case fol.CONJUNCTION:
            branches = [[operands[0], operands[1]]]
        case fol.IFTHEN:
            branches = [[operands[0].get_negation()], [operands[1]]]
        case fol.IFF:
            branches = [
                [operands[0], operands[1]],
                [operands[0].get_negation(), operands[1].get_negation()],
            ]
        case fol.NEGATION:
            return _negated(formula)
        case _:
            return _NO_EXPANSION
    return Expansion([ProofTreeNode(branch) for branch in branches], True)


# --- preferences ---------------------------------------------------------
def makes_contradiction(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    """Every branch the rule would add closes at once."""
    expansion = expand(tree, node, formula)
    if not expansion.branches:
        return False
    pending = tree.pending_grafts(node, expansion.branches)
    return len(pending) > 0 and all(
        tree.contradiction_below(leaf, template) for leaf, template in pending
    )


def is_quantifier_negation(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    if formula.major_operator() != NEGATION:
        return False
    inner = _inner_operator(formula)
    return is_universal_operator(inner) or is_existential_operator(inner)


def is_non_branching_sentential(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    operator = formula.major_operator()
    if operator == CONJUNCTION:
        return True
    if operator == NEGATION:
        return _inner_operator(formula) in (DISJUNCTION, IFTHEN, NEGATION)
    return False


def is_existential(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    return is_existential_operator(formula.major_operator())


def is_universal(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    return is_universal_operator(formula.major_operator())


def is_branching_sentential(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    operator = formula.major_operator()
    if operator in (DISJUNCTION, IFTHEN, IFF):
        return True
    if operator == NEGATION:
        return _inner_operator(formula) in (CONJUNCTION, IFF)
    return False


def is_wildcard(tree: ProofTree, node: ProofTreeNode, formula: Formula) -> bool:
    return not formula.is_atom()


PREFERENCES: List[Preference] = [
    makes_contradiction,
    is_quantifier_negation,
    is_non_branching_sentential,
    is_existential,
    is_universal,
    is_branching_sentential,
    is_wildcard,
]


# --- generator -----------------------------------------------------------
class ProofTreeGenerator:
    """Builds proof trees by applying tree rules in order of preference.

    At every stage the first preference that some (node, formula) pair
    satisfies wins, and after each change scanning starts over from the
    first preference. First-order logic is undecidable, so generation is
    not guaranteed to stop; a caller that needs a bound has to impose it
    around generate().
    """

    def __init__(self, preferences: Optional[List[Preference]] = None):
        self.preferences = list(PREFERENCES if preferences is None else preferences)

    def generate(self, premises: List[Formula], conclusion: Formula) -> ProofTree:
        tree = self.initial_tree(premises, conclusion)
        if tree.contradiction_from(tree.root):
            tree.root.close()
            logging.info("generator:initial:closed=True")
            return tree
        self.apply_rules(tree)
        logging.info(f"generator:done:size={tree.size()}:closes={tree.closes()}")
        return tree

    def initial_tree(self, premises: List[Formula], conclusion: Formula) -> ProofTree:
        return ProofTree(list(premises) + [conclusion.get_negation()])

    def apply_rules(self, tree: ProofTree) -> bool:
        """Apply rules until no preference can be satisfied.

        Returns whether the tree changed at all.
        """
        changed = False
        i = 0
        while i < len(self.preferences):
            if self.apply_rule_where(tree, self.preferences[i]):
                changed = True
                i = 0
            else:
                i += 1
        return changed

    def apply_rule_where(self, tree: ProofTree, preference: Preference) -> bool:
        for node in tree.unclosed_nodes():
            for formula in node.formulae:
                if node.is_tried(formula) or not preference(tree, node, formula):
                    continue
                expansion = expand(tree, node, formula)
                if expansion.tick:
                    node.tick(formula)
                if expansion.branches and tree.graft_below(node, expansion.branches):
                    logging.debug(
                        f"generator:apply:preference={preference.__name__}:formula={formula}"
                    )
                    return True
        return False


def generate_proof_tree(premises: List[Formula], conclusion: Formula) -> ProofTree:
    return ProofTreeGenerator().generate(premises, conclusion)
