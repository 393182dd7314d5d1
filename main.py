import argparse
import logging
import sys

from proof_tree import FormationException
from proof_tree.config import LOG_LEVEL, LOG_FORMAT
from proof_tree.interpreter import (
    ArgumentReadException, fol2sentence, read_argument_console, read_argument_file,
)
from proof_tree.prover import prove
from proof_tree.tableau.generator import ConstantsExhaustedException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a proof tree for a first-order argument and report whether it is valid."
    )
    parser.add_argument(
        "file", nargs="?",
        help="argument file: one premise per line, conclusion on the last line "
             "(or a .json argument). Without it the argument is read interactively.",
    )
    parser.add_argument("--infix", action="store_true", help="print the tree in infix notation")
    parser.add_argument("--unicode", action="store_true", help="print infix formulae with unicode symbols")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="logging level (default: %(default)s)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)

    try:
        if args.file:
            premises, conclusion = read_argument_file(args.file)
        else:
            premises, conclusion = read_argument_console()
    except (OSError, EOFError, FormationException, ArgumentReadException) as e:
        logging.error(f"main:read:error={e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.infix or args.unicode:
        formatter = lambda formula: fol2sentence(formula, unicode=args.unicode)
    else:
        formatter = str

    try:
        _, report = prove(premises, conclusion, formatter=formatter)
    except ConstantsExhaustedException as e:
        logging.error(f"main:prove:error={e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(report.summary(), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
