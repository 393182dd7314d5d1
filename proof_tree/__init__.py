from collections import deque
from typing import List, Tuple, Union, Sequence
import re

# --- surface symbols -----------------------------------------------------
NEGATION = "~"
DISJUNCTION = "+"
CONJUNCTION = "&"
IFTHEN = ">"
IFF = ":"
FORALL = "@"
EXISTS = "#"
OPEN_BRACKET = "("
CLOSE_BRACKET = ")"

BINARY_OPERATORS = DISJUNCTION + CONJUNCTION + IFTHEN + IFF
OPERATORS = NEGATION + BINARY_OPERATORS
QUANTIFIERS = FORALL + EXISTS
BRACKETS = OPEN_BRACKET + CLOSE_BRACKET
PREDICATES = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
TERMS = "abcdefghijklmnopqrstuvwxyz"

# smaller binds tighter
_operator_priority = {
    NEGATION: 1,
    FORALL: 2,
    EXISTS: 2,
    CONJUNCTION: 3,
    DISJUNCTION: 4,
    IFTHEN: 5,
    IFF: 6,
}

# token kinds used by the well-formedness reduction
_ATOM = "atom"
_NEGATION = "negation"
_QUANTIFIER = "quantifier"
_BINARY = "binary"
_INVALID = "invalid"


class FormationException(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


# --- tokenizing ----------------------------------------------------------
def tokenize(formula: str) -> List[str]:
    """Split a formula string into tokens.

    Operators and brackets are single tokens. A predicate letter or a
    quantifier symbol takes the run of lowercase letters right after it
    (its terms, or its bound variable). A lowercase run anywhere else is a
    token of its own and never well formed.
    """
    formula = re.sub(r"\s+", "", formula)
    tokens = []
    i = 0
    while i < len(formula):
        ch = formula[i]
        if ch in PREDICATES or ch in QUANTIFIERS or ch in TERMS:
            j = i + 1
            while j < len(formula) and formula[j] in TERMS:
                j += 1
            tokens.append(formula[i:j])
            i = j
        else:
            tokens.append(ch)
            i += 1
    return tokens


def token_kind(token: str) -> str:
    head, rest = token[:1], token[1:]
    if head != "" and head in PREDICATES and all(ch in TERMS for ch in rest):
        return _ATOM
    if head != "" and head in QUANTIFIERS and len(rest) == 1 and rest in TERMS:
        return _QUANTIFIER
    if token == NEGATION:
        return _NEGATION
    if len(token) == 1 and token in BINARY_OPERATORS:
        return _BINARY
    return _INVALID


def _reduce(kinds: List[str]) -> List[str]:
    result = []
    i = 0
    while i < len(kinds):
        kind = kinds[i]
        following = kinds[i + 1:i + 3]
        if kind in (_NEGATION, _QUANTIFIER) and following[:1] == [_ATOM]:
            result.append(_ATOM)
            i += 2
        elif kind == _BINARY and following == [_ATOM, _ATOM]:
            result.append(_ATOM)
            i += 3
        else:
            result.append(kind)
            i += 1
    return result


def is_valid_prefix(tokens: Sequence[str]) -> bool:
    """Answer whether tokens form a well formed formula in prefix notation.

    Predicate tokens are atoms from the start; quantifier+body,
    negation+operand and connective+two operands are collapsed into atoms
    until nothing changes. Well formed means exactly one atom is left.
    """
    current = [token_kind(token) for token in tokens]
    previous = None
    while previous != current:
        previous = current
        current = _reduce(current)
    return current == [_ATOM]


def _is_unary(token: str) -> bool:
    return token_kind(token) in (_NEGATION, _QUANTIFIER)


def _priority(token: str) -> int:
    return _operator_priority.get(token[:1], 0)


def to_prefix(tokens: Sequence[str]) -> List[str]:
    """Convert infix tokens to prefix (Polish) order.

    Scans right to left with an operator stack. The result is not checked;
    it is well formed whenever the input was.
    """
    stack = []
    result = deque()
    for token in reversed(tokens):
        kind = token_kind(token)
        if kind in (_NEGATION, _QUANTIFIER, _BINARY):
            while stack and stack[-1] != CLOSE_BRACKET and (
                (_is_unary(token) and _is_unary(stack[-1]))
                or _priority(stack[-1]) < _priority(token)
            ):
                result.appendleft(stack.pop())
            stack.append(token)
        elif token == OPEN_BRACKET:
            while True:
                if not stack:
                    raise FormationException(f"{''.join(tokens)} has an unmatched {OPEN_BRACKET}")
                top = stack.pop()
                if top == CLOSE_BRACKET:
                    break
                result.appendleft(top)
        elif token == CLOSE_BRACKET:
            stack.append(token)
        else:
            result.appendleft(token)
    while stack:
        result.appendleft(stack.pop())
    return list(result)


# --- formula -------------------------------------------------------------
class Formula:
    """A formula of first-order logic, stored as prefix tokens.

    Accepts either infix (fully parenthesized where needed) or prefix
    notation, as a string or as a token sequence. Propositional formulae are
    the quantifier-free ones.
    """

    __slots__ = ("_tokens", "_operands")

    def __init__(self, formula: Union[str, Sequence[str]]):
        tokens = tokenize(formula) if isinstance(formula, str) else list(formula)
        if not is_valid_prefix(tokens):
            tokens = to_prefix(tokens)
            if not is_valid_prefix(tokens):
                raise FormationException(f"{''.join(tokens)} is not a well formed formula")
        self._tokens: Tuple[str, ...] = tuple(tokens)
        self._operands = None

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    def get_negation(self) -> "Formula":
        return Formula((NEGATION,) + self._tokens)

    def major_operator(self) -> str:
        """The operator evaluated last, or "" for an atomic formula."""
        return self._tokens[0] if len(self._tokens) > 1 else ""

    def major_operands(self) -> List["Formula"]:
        if self._operands is None:
            self._operands = self._split_operands()
        return list(self._operands)

    def _split_operands(self) -> List["Formula"]:
        operator = self.major_operator()
        if operator == "":
            return [self]
        body = self._tokens[1:]
        if _is_unary(operator):
            return [Formula(body)]
        needed = 1
        i = 0
        for i, token in enumerate(body):
            kind = token_kind(token)
            if kind == _BINARY:
                needed += 1
            elif kind == _ATOM:
                needed -= 1
            if needed == 0:
                break
        return [Formula(body[:i + 1]), Formula(body[i + 1:])]

    def is_quantified(self) -> bool:
        return token_kind(self.major_operator()) == _QUANTIFIER

    def quantifier_variable(self) -> str:
        if not self.is_quantified():
            raise ValueError(f"{self} is not quantified")
        return self._tokens[0][1:]

    def get_constants(self) -> List[str]:
        """Free term letters of this formula, in order of appearance."""
        return _free_terms(self, [])

    def substitute(self, variable: str, constant: str) -> "Formula":
        """Replace every occurrence of variable by constant.

        The replacement is purely textual; callers only use it to
        instantiate the variable bound by the quantifier just removed.
        """
        return Formula([token.replace(variable, constant) for token in self._tokens])

    def is_atom(self) -> bool:
        """A predicate token under any number of negations."""
        return token_kind(self._tokens[-1]) == _ATOM and all(token == NEGATION for token in self._tokens[:-1])

    def bound_variables(self) -> List[str]:
        """Variables bound by some quantifier inside this formula."""
        result = []
        for token in self._tokens:
            if token_kind(token) == _QUANTIFIER and token[1:] not in result:
                result.append(token[1:])
        return result

    def contradicts(self, other: "Formula") -> bool:
        if not (self.is_atom() and other.is_atom()):
            return False
        return (NEGATION,) + other._tokens == self._tokens or (NEGATION,) + self._tokens == other._tokens

    def __eq__(self, other):
        return isinstance(other, Formula) and self._tokens == other._tokens

    def __hash__(self):
        return hash(("formula", self._tokens))

    def __len__(self):
        return len(self._tokens)

    def __str__(self):
        return "".join(self._tokens)

    def __repr__(self):
        return f"Formula({str(self)!r})"


def _free_terms(formula: Formula, bound: List[str]) -> List[str]:
    operator = formula.major_operator()
    if operator == "":
        result = []
        for term in formula.tokens[0][1:]:
            if term not in bound and term not in result:
                result.append(term)
        return result
    if token_kind(operator) == _QUANTIFIER:
        bound = bound + [operator[1:]]
    result = []
    for operand in formula.major_operands():
        for term in _free_terms(operand, list(bound)):
            if term not in result:
                result.append(term)
    return result


def is_binary_operator(operator: str) -> bool:
    return token_kind(operator) == _BINARY


def is_universal_operator(operator: str) -> bool:
    return operator[:1] == FORALL and token_kind(operator) == _QUANTIFIER


def is_existential_operator(operator: str) -> bool:
    return operator[:1] == EXISTS and token_kind(operator) == _QUANTIFIER
