from typing import Callable, Iterable, List, Tuple
from pathlib import Path
import logging

from pydantic import BaseModel, Field, ValidationError

from proof_tree import (
    Formula, FormationException, NEGATION, DISJUNCTION, CONJUNCTION, IFTHEN, IFF,
    FORALL, EXISTS, is_binary_operator,
)

Argument = Tuple[List[Formula], Formula]

_unicode_symbol_mapping = {
    '¬': NEGATION,
    '∧': CONJUNCTION,
    '∨': DISJUNCTION,
    '→': IFTHEN,
    '↔': IFF,
    '∀': FORALL,
    '∃': EXISTS,
}

_unicode_symbol_mapping_reversed = {value: key for key, value in _unicode_symbol_mapping.items()}

_turnstiles = ("⊢", "|-")
COMMENT = "%"


class ArgumentReadException(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ArgumentFile(BaseModel):
    """A stored argument, as kept in the JSON files of the argument directory."""
    premises: List[str] = Field(default_factory=list, description="premises, one formula each")
    conclusion: str = Field(description="the unnegated conclusion")
    description: str = Field(default="", description="what the argument shows")


def normalize(formula: str) -> str:
    """Replace unicode connectives and quantifiers by the reserved ASCII symbols."""
    for symbol, ascii_symbol in _unicode_symbol_mapping.items():
        formula = formula.replace(symbol, ascii_symbol)
    return formula


def parse_formula(formula: str) -> Formula:
    return Formula(normalize(formula))


def fol_interpreter(fol: str) -> Argument:
    """Read a sequent such as "P>Q, P ⊢ Q".

    Without a turnstile the whole string is taken as a conclusion with no
    premises.
    """
    for turnstile in _turnstiles:
        if turnstile in fol:
            premises, goal = fol.split(turnstile, 1)
            premises = [premise for premise in premises.split(",") if premise.strip() != ""]
            return ([parse_formula(premise) for premise in premises], parse_formula(goal))
    return ([], parse_formula(fol))


# --- argument input ------------------------------------------------------
def read_argument(lines: Iterable[str]) -> Argument:
    """Premises one per line, conclusion on the last non-blank line."""
    formulae = []
    for line in lines:
        line = line.strip()
        if line == "" or line.startswith(COMMENT):
            continue
        formulae.append(parse_formula(line))
    if len(formulae) == 0:
        raise ArgumentReadException("argument has no conclusion")
    return (formulae[:-1], formulae[-1])


def _stored_argument(text: str) -> ArgumentFile:
    try:
        return ArgumentFile.model_validate_json(text)
    except ValidationError as e:
        raise ArgumentReadException(f"not a stored argument: {e}") from e


def read_argument_json(text: str) -> Argument:
    stored = _stored_argument(text)
    return ([parse_formula(premise) for premise in stored.premises], parse_formula(stored.conclusion))


def read_argument_file(path) -> Argument:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    logging.info(f"interpreter:read:path={path}")
    if path.suffix.lower() == ".json":
        return read_argument_json(text)
    return read_argument(text.splitlines())


def read_argument_console(read: Callable[[str], str] = input, write: Callable[[str], None] = print) -> Argument:
    """Prompt for premises until a blank one, then for the conclusion.

    Poorly formed input is reported and asked for again.
    """
    premises = []
    write("Please enter each premise followed by Enter.")
    write("Enter a blank premise when done.")
    while True:
        line = read(f"Premise {len(premises) + 1}: ")
        if line.strip() == "":
            break
        try:
            premises.append(parse_formula(line))
        except FormationException as e:
            logging.debug(f"interpreter:console:error={e}")
            write("Poorly formed premise! Please re-enter.")

    while True:
        line = read("Conclusion: ")
        try:
            conclusion = parse_formula(line)
        except FormationException as e:
            logging.debug(f"interpreter:console:error={e}")
            write("Poorly formed conclusion! Please re-enter.")
            continue
        return (premises, conclusion)


def list_arguments(dirpath) -> List[str]:
    """JSON argument files in dirpath (file names only)."""
    dirpath = Path(dirpath)
    if not dirpath.is_dir():
        return []
    return sorted(path.name for path in dirpath.iterdir() if path.suffix.lower() == ".json")


def load_argument(dirpath, filename: str) -> ArgumentFile:
    with open(Path(dirpath) / filename, "r", encoding="utf-8") as f:
        return _stored_argument(f.read())


# --- output --------------------------------------------------------------
def fol2sentence(formula: Formula, unicode: bool = False) -> str:
    """Render a formula in infix notation.

    Binary subformulae get one pair of brackets each, so the result parses
    back to the same formula.
    """
    def symbol(operator: str) -> str:
        if not unicode:
            return operator
        return _unicode_symbol_mapping_reversed.get(operator[:1], operator[:1]) + operator[1:]

    operator = formula.major_operator()
    if operator == "":
        return str(formula)
    operands = formula.major_operands()
    if is_binary_operator(operator):
        left = fol2sentence(operands[0], unicode)
        right = fol2sentence(operands[1], unicode)
        return f"({left}{symbol(operator)}{right})"
    return f"{symbol(operator)}{fol2sentence(operands[0], unicode)}"
