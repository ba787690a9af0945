"""
Layout of the graph display.

build_graph() filters the quantifier nodes out of the NFA, then uses the
display links recorded while building the NFA to place the remaining nodes
on a grid. The graph nodes are new objects; each NFA node keeps the index of
its graph node for run highlighting.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .nfa_builder import AutomatonNode
from .regex_tokens import QUANTIFIER_TYPES, TokenType

Coord = Tuple[float, float]

# Token types -> CSS classes of graph nodes
GRAPH_NODE_TYPES: Dict[str, str] = {
    TokenType.CHAR_LITERAL: 'value',
    TokenType.ESCAPED_CHAR: 'value-special',
    TokenType.CHAR_CLASS: 'value-special',
    TokenType.BRACKET_CLASS: 'value-special',
    TokenType.WILDCARD: 'value-special',
    TokenType.ALTERNATION: 'operator',
    TokenType.GROUP_OPEN: 'delimiter',
    TokenType.GROUP_CLOSE: 'delimiter',
    TokenType.FIRST: 'first',
    TokenType.LAST: 'last',
}


@dataclass
class GraphNode:
    label: str
    coord: Coord
    classes: str
    run_classes: str = ''
    quantifier: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {
            'label': self.label,
            'coord': list(self.coord),
            'classes': self.classes,
            'runClasses': self.run_classes,
        }
        if self.quantifier:
            data['quantifier'] = self.quantifier
        return data


@dataclass
class Graph:
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[Tuple[Coord, Coord]] = field(default_factory=list)
    forks: List[List[Coord]] = field(default_factory=list)
    merges: List[List[Coord]] = field(default_factory=list)
    parentheses: List[Tuple[Coord, Coord]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'nodes': [node.to_dict() for node in self.nodes],
            'links': [[list(a), list(b)] for a, b in self.links],
            'forks': [[list(coord) for coord in fork] for fork in self.forks],
            'merges': [[list(coord) for coord in merge] for merge in self.merges],
            'parentheses': [[list(a), list(b)] for a, b in self.parentheses],
        }


def filter_nodes(nodes: List[AutomatonNode]) -> List[AutomatonNode]:
    """Drop the quantifier nodes and index the others by graph position."""
    graph_nodes = []
    for node in nodes:
        if node.type not in QUANTIFIER_TYPES:
            node.graph_node_index = len(graph_nodes)
            graph_nodes.append(node)
    return graph_nodes


def create_graph_nodes(nodes: List[AutomatonNode]) -> List[GraphNode]:
    graph_nodes = []
    for node in nodes:
        classes = GRAPH_NODE_TYPES[node.type]
        if node.quantifier:
            classes += ' quantifier'
        graph_nodes.append(GraphNode(
            label=node.label,
            coord=node.coord,
            classes=classes,
            quantifier=node.quantifier,
        ))
    return graph_nodes


def fork_delta_y(heights: List[int], index: int) -> float:
    """
    Vertical offset of the branch at index relative to its fork.

    Branches are stacked top to bottom, each as tall as its height. The
    stack is shifted so that the fork sits halfway between the centres of
    the first and last branches.
    """
    dy = sum(heights[:index]) + heights[index] / 2
    offset = (heights[0] / 2 + sum(heights) - heights[-1] / 2) / 2
    return dy - offset


def calculate_layout(nodes: List[AutomatonNode]) -> Graph:
    """
    Place the display nodes and collect the shapes to draw.

    Args:
        nodes: NFA nodes without quantifiers, in build order

    Returns:
        The graph with node coordinates, links, forks, merges and the
        coordinates of quantified parentheses
    """
    graph = Graph()

    # Pass 1: Coordinates and links
    for node in nodes:
        prev = node.graph.prev

        if node.type == TokenType.FIRST:
            node.coord = (0, 0)

        # Fork (no link)
        elif node.is_fork:
            node.coord = prev[0].coord

        # Post fork
        elif node.graph.fork_index is not None:
            fork = prev[0]
            x0, y0 = fork.coord
            dy = fork_delta_y(fork.graph.heights, node.graph.fork_index)
            node.coord = (x0 + 1, y0 + dy)

        # Merge
        elif len(prev) > 1:
            x = max(p.coord[0] for p in prev) + 1
            y = (prev[0].coord[1] + prev[-1].coord[1]) / 2
            node.coord = (x, y)

        # Link
        elif len(prev) == 1:
            x0, y0 = prev[0].coord
            node.coord = (x0 + 1, y0)
            graph.links.append(((x0, y0), node.coord))

    # Pass 2: Forks, merges, and parentheses with quantifiers
    for node in nodes:
        if node.is_fork:
            graph.forks.append([node.coord] + [n.coord for n in node.graph.next])
        elif len(node.graph.prev) > 1:
            graph.merges.append([node.coord] + [n.coord for n in node.graph.prev])
        elif node.type == TokenType.GROUP_OPEN and node.quantifier:
            graph.parentheses.append((node.coord, node.close.coord))

    graph.nodes = create_graph_nodes(nodes)
    return graph


def build_graph(nfa: List[AutomatonNode]) -> Graph:
    """Lay out the display graph of an NFA."""
    return calculate_layout(filter_nodes(nfa))
