"""
Compile a regex and generate every structure the front end needs.

Lexemes:
    - Used for syntax highlighting, created by the parser.
    - Mutated: invalid flags (validation), parenthesis spans (RPN
      conversion), operand spans (NFA build).

NFA:
    - Used to run the regex, built from the RPN tokens.
    - Mutated: coordinates and graph node indexes (layout).

Graph:
    - Used for the graph display: nodes with coordinates, links (one to
      one), forks (one to many), merges (many to one) and quantified
      parentheses.

Warnings:
    - Feedback for the user, raised by the parser and the validator.
"""
from dataclasses import dataclass
import logging
from typing import Dict, List

from .graph_layout import Graph, build_graph
from .nfa_builder import AutomatonNode, build_nfa
from .nfa_simulation import RunStep, init_nfa, set_matching_graph_nodes, step_forward
from .regex_autofix import generate_regex_from_rpn
from .regex_parser import parse
from .regex_rpn import convert_to_rpn
from .regex_tokens import Lexeme, Token
from .regex_validation import validate
from .regex_warnings import Diagnostics, count_warnings
from .token_info import get_token_info

logger = logging.getLogger(__name__)


@dataclass
class CompiledRegex:
    regex: str
    lexemes: List[Lexeme]
    tokens: List[Token]
    rpn: List[Token]
    nfa: List[AutomatonNode]
    graph: Graph
    warnings: Diagnostics

    def get_token_info(self, index: int) -> Dict[str, str]:
        return get_token_info(self.lexemes, index)

    def autofix(self) -> str:
        return generate_regex_from_rpn(self.rpn)

    def init(self) -> RunStep:
        return init_nfa(self.nfa)

    def step(self, current_nodes: List[AutomatonNode], test_string: str, pos: int) -> RunStep:
        return step_forward(current_nodes, test_string, pos)

    def highlight(self, run_step: RunStep) -> None:
        """Set the run classes of the graph nodes for a step."""
        set_matching_graph_nodes(self.graph.nodes, run_step.matching_nodes, run_step.run_state)


def compile_regex(regex: str) -> CompiledRegex:
    """
    Run the whole pipeline on a regex.

    Steps:
        - Parse into lexemes and tokens.
        - Validate the tokens.
        - Convert to RPN (adds parenthesis spans).
        - Build the NFA and the graph links (adds operand spans).
        - Lay out the graph.

    Compilation never fails on user input: defects end up in warnings and
    the result is built from what could be salvaged.
    """
    lexemes, tokens, warnings = parse(regex)
    valid_tokens = validate(tokens, lexemes, warnings)
    rpn = convert_to_rpn(valid_tokens, lexemes)
    nfa = build_nfa(rpn, lexemes)
    graph = build_graph(nfa)

    logger.debug(
        "Compiled %r: %d lexemes, %d NFA nodes, %d warnings",
        regex, len(lexemes), len(nfa), count_warnings(warnings),
    )

    return CompiledRegex(
        regex=regex,
        lexemes=lexemes,
        tokens=tokens,
        rpn=rpn,
        nfa=nfa,
        graph=graph,
        warnings=warnings,
    )
