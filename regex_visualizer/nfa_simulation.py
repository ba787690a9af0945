"""
Step by step simulation of a compiled regex NFA.

The simulation does not run to completion on its own: init_nfa() produces
the first step and each call to step_forward() consumes one symbol, so the
caller decides the pacing.

Run states:
    starting -> running -> (success | failure | endOfString)
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set

from .graph_layout import GraphNode
from .nfa_builder import AutomatonNode
from .regex_tokens import TokenType

STARTING = 'starting'
RUNNING = 'running'
SUCCESS = 'success'
FAILURE = 'failure'
END_OF_STRING = 'endOfString'

TERMINAL_STATES = frozenset({SUCCESS, FAILURE, END_OF_STRING})


@dataclass
class RunStep:
    run_state: str
    matching_nodes: List[AutomatonNode] = field(default_factory=list)
    next_nodes: List[AutomatonNode] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.run_state in TERMINAL_STATES

    def to_dict(self) -> Dict:
        return {
            'run_state': self.run_state,
            'matching_nodes': [node.node_index for node in self.matching_nodes],
            'next_nodes': [node.node_index for node in self.next_nodes],
        }


def propagate(node: AutomatonNode, next_nodes: List[AutomatonNode], visited: Set[int]) -> bool:
    """
    Walk forward through control nodes, gathering the value nodes to test.

    The NFA has loops, so nodes already in visited (by node_index) are
    skipped. The walk is depth first on an explicit stack, successors in
    edge order, so nesting depth is not limited by the interpreter stack.

    Returns:
        True as soon as the 'last' node is reached
    """
    stack = [node]

    while stack:
        current = stack.pop()
        if current.node_index in visited:
            continue
        visited.add(current.node_index)

        # Reached the last node
        if current.type == TokenType.LAST:
            return True

        # Value node
        if current.match is not None:
            next_nodes.append(current)
            continue

        # Control node, first successor on top
        stack.extend(reversed(current.next_nodes))

    return False


def init_nfa(nfa: List[AutomatonNode]) -> RunStep:
    """
    Initialize a run from the 'first' node.

    Args:
        nfa: Nodes returned by build_nfa()

    Returns:
        A 'starting' step whose next_nodes are the value nodes to test
        against the first symbol
    """
    next_nodes: List[AutomatonNode] = []
    propagate(nfa[0], next_nodes, set())
    return RunStep(STARTING, [nfa[0]], next_nodes)


def step_forward(current_nodes: List[AutomatonNode], test_string: str, pos: int) -> RunStep:
    """
    Test the symbol at pos against the current value nodes.

    The first matching node that reaches the 'last' node ends the run with
    success; other paths are not explored further.

    Args:
        current_nodes: next_nodes of the previous step
        test_string: The input string
        pos: Index of the symbol to consume

    Returns:
        The resulting step. success and failure carry no next nodes.
    """
    if pos >= len(test_string):
        return RunStep(FAILURE)

    ch = test_string[pos]
    next_nodes: List[AutomatonNode] = []
    matching_nodes: List[AutomatonNode] = []
    visited: Set[int] = set()

    # Test the current list of value nodes
    for node in current_nodes:
        if not node.match(ch):
            continue
        matching_nodes.append(node)
        for next_node in node.next_nodes:
            if propagate(next_node, next_nodes, visited):
                # Successful match
                return RunStep(SUCCESS, [node], [])

    # Failure to match
    if not matching_nodes:
        return RunStep(FAILURE)

    # End of test string
    if pos == len(test_string) - 1:
        return RunStep(END_OF_STRING, matching_nodes, next_nodes)

    return RunStep(RUNNING, matching_nodes, next_nodes)


def set_matching_graph_nodes(graph_nodes: List[GraphNode], matching_nodes: List[AutomatonNode],
                             run_state: str) -> None:
    """
    Highlight the graph nodes of a step.

    The run classes are mutated in place, so concurrent runs against the
    same compiled regex need their own copy of the graph.
    """
    for graph_node in graph_nodes:
        graph_node.run_classes = ''

    for node in matching_nodes:
        if node.graph_node_index is not None:
            graph_nodes[node.graph_node_index].run_classes = 'active'

    graph_nodes[-1].run_classes += f" {run_state}"


def run_nfa(nfa: List[AutomatonNode], test_string: str) -> Iterator[RunStep]:
    """
    Drive a whole run, yielding the initial step and then one step per symbol.

    Stops after the first terminal state. An empty test string only yields
    the initial step.
    """
    run_step = init_nfa(nfa)
    yield run_step

    for pos in range(len(test_string)):
        run_step = step_forward(run_step.next_nodes, test_string, pos)
        yield run_step
        if run_step.is_terminal:
            break
