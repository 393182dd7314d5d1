import os

LOG_LEVEL = os.environ.get("PROOF_TREE_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s:%(levelname)s:%(message)s"

# tree rendering
TREE_INDENT = "|   "
CLOSED_MARK = " [X]"
FORMULA_SEPARATOR = ", "

# letters available for constants introduced by quantifier instantiation
TERM_LETTERS = "abcdefghijklmnopqrstuvwxyz"

# sample arguments listed by the web front end
ARGUMENT_DIR = os.environ.get("PROOF_TREE_ARGUMENT_DIR", "./arguments")
SERVER_PORT = int(os.environ.get("PROOF_TREE_PORT", "7860"))
