from typing import Callable, List, Tuple
import logging
import time

from pydantic import BaseModel, Field

from proof_tree import Formula
from proof_tree.tableau import ProofTree
from proof_tree.tableau.generator import ProofTreeGenerator


class ProofReport(BaseModel):
    premises: List[str] = Field(default_factory=list, description="premises as entered, rendered")
    conclusion: str = Field(description="the unnegated conclusion, rendered")
    valid: bool = Field(description="every branch of the tree closes")
    size: int = Field(description="number of nodes in the tree")
    build_time: float = Field(description="seconds spent generating the tree")
    tree: str = Field(description="the rendered tree")

    def verdict(self) -> str:
        return "valid" if self.valid else "invalid"

    def summary(self) -> str:
        return (
            f"Tree build time: {self.build_time} seconds\n"
            f"Tree size      : {self.size}\n"
            f"Argument type  : {self.verdict()}\n"
            f"\n"
            f"{self.tree}"
        )


def prove(premises: List[Formula],
          conclusion: Formula,
          formatter: Callable[[Formula], str] = str,
          generator: ProofTreeGenerator = None) -> Tuple[ProofTree, ProofReport]:
    """Build the proof tree for premises ⊢ conclusion and report on it.

    Only the generation call is timed. Generation may not terminate for
    some first-order arguments.
    """
    if generator is None:
        generator = ProofTreeGenerator()
    start = time.perf_counter()
    tree = generator.generate(premises, conclusion)
    stop = time.perf_counter()

    report = ProofReport(
        premises=[formatter(premise) for premise in premises],
        conclusion=formatter(conclusion),
        valid=tree.closes(),
        size=tree.size(),
        build_time=stop - start,
        tree=tree.render(formatter),
    )
    logging.info(f"prover:result:valid={report.valid}:size={report.size}:time={report.build_time}")
    return (tree, report)
