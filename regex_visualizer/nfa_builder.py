"""
Construction of the nondeterministic finite automaton from RPN tokens.

build_nfa() returns the ordered list of connected nodes and writes operand
spans onto the operator lexemes. Two graphs are built side by side:
    - The NFA used to run the regex (next_nodes).
    - The graph display, which bypasses quantifier nodes (node.graph).
Building both at once is simpler than removing quantifiers afterwards.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .regex_tokens import AutomatonError, Lexeme, Match, Token, TokenType

HEIGHT = 1


@dataclass(eq=False)
class GraphLinks:
    """Display graph bookkeeping of a node, separate from the NFA edges."""
    prev: List['AutomatonNode'] = field(default_factory=list)
    next: Optional[List['AutomatonNode']] = None  # forks only
    fork_index: Optional[int] = None  # position in the predecessor fork
    heights: Optional[List[int]] = None  # forks only, one per branch


@dataclass(eq=False)
class AutomatonNode:
    label: str
    type: TokenType
    pos: Optional[int] = None
    index: Optional[int] = None
    match: Optional[Match] = field(default=None, repr=False)
    next_nodes: List['AutomatonNode'] = field(default_factory=list, repr=False)
    node_index: int = -1
    quantifier: Optional[str] = None
    close: Optional['AutomatonNode'] = field(default=None, repr=False)
    graph: GraphLinks = field(default_factory=GraphLinks, repr=False)
    graph_node_index: Optional[int] = None
    coord: Optional[tuple] = None

    @property
    def is_fork(self) -> bool:
        return self.graph.heights is not None


def new_node(token: Token, **config) -> AutomatonNode:
    node = AutomatonNode(
        label=token.label,
        type=token.type,
        pos=token.pos,
        index=token.index,
        match=token.match,
    )
    for key, value in config.items():
        setattr(node, key, value)
    return node


@dataclass
class Fragment:
    """Partial automaton living on the construction stack."""
    # NFA
    first_node: AutomatonNode
    terminal_nodes: List[AutomatonNode]
    nodes: List[AutomatonNode]

    # Operand lexeme span
    begin: Optional[int]
    end: Optional[int]

    # Graph display
    first_graph_node: AutomatonNode
    terminal_graph_nodes: List[AutomatonNode]
    height: int


def connect(node1: AutomatonNode, node2: AutomatonNode) -> None:
    node1.next_nodes.append(node2)


def connect_fragment(frag: Fragment, node: AutomatonNode) -> None:
    for terminal in frag.terminal_nodes:
        connect(terminal, node)


# Graph display links

def graph_link(node1: AutomatonNode, node2: AutomatonNode) -> None:
    node2.graph.prev = [node1]


def graph_fork(node1: AutomatonNode, node2: AutomatonNode, index: int) -> None:
    node1.graph.next.append(node2)
    node2.graph.prev = [node1]
    node2.graph.fork_index = index


def graph_merge(nodes: List[AutomatonNode], node2: AutomatonNode) -> None:
    node2.graph.prev = list(nodes)


def set_quantifier(frag: Fragment, quantifier: str) -> None:
    # The same node for values, the open and close nodes for parentheses
    frag.first_graph_node.quantifier = quantifier
    frag.terminal_graph_nodes[0].quantifier = quantifier


class NFABuilder:
    """Evaluates RPN tokens on a stack of fragments."""

    def __init__(self, lexemes: List[Lexeme]):
        self.lexemes = lexemes
        self.fragments: List[Fragment] = []

    def set_operator_range(self, token: Token, frag1: Fragment, frag2: Optional[Fragment] = None) -> None:
        """Record the operand spans of an operator on its lexeme."""
        lexeme = self.lexemes[token.index]
        lexeme.begin_l = frag1.begin
        lexeme.end_l = frag1.end
        if frag2 is not None:
            lexeme.begin_r = frag2.begin
            lexeme.end_r = frag2.end

    def push_value(self, token: Token) -> None:
        """Create a value node and push it as a fragment."""
        node = new_node(token)
        # Bracket expressions span several lexemes
        end = token.end if token.end is not None else token.index

        self.fragments.append(Fragment(
            first_node=node,
            terminal_nodes=[node],
            nodes=[node],
            begin=token.index,
            end=end,
            first_graph_node=node,
            terminal_graph_nodes=[node],
            height=HEIGHT,
        ))

    def concat(self, frag1: Fragment, frag2: Fragment) -> Fragment:
        """Connect the terminals of frag1 to the first node of frag2."""
        connect_fragment(frag1, frag2.first_node)
        graph_merge(frag1.terminal_graph_nodes, frag2.first_graph_node)

        return Fragment(
            first_node=frag1.first_node,
            terminal_nodes=frag2.terminal_nodes,
            nodes=frag1.nodes + frag2.nodes,
            begin=frag1.begin,
            end=frag2.end,
            first_graph_node=frag1.first_graph_node,
            terminal_graph_nodes=frag2.terminal_graph_nodes,
            height=max(frag1.height, frag2.height),
        )

    def alternate(self, frag1: Fragment, frag2: Fragment, token: Token) -> Fragment:
        """
        Fork between two fragments.

        A left operand that is itself an alternation has its fork absorbed,
        so a|b|c becomes a single three-way fork.
        """
        fork = new_node(token)
        fork.graph.next = []
        first1 = frag1.first_node
        first2 = frag2.first_node

        if first2.type == TokenType.ALTERNATION:
            raise AutomatonError('NFA: Fork merge should not happen')

        if first1.type != TokenType.ALTERNATION:
            # No fork merging
            connect(fork, first1)
            connect(fork, first2)
            nodes = [fork] + frag1.nodes + frag2.nodes

            graph_fork(fork, frag1.first_graph_node, 0)
            graph_fork(fork, frag2.first_graph_node, 1)
            fork.graph.heights = [frag1.height, frag2.height]
        else:
            # Merge the left hand fork
            for next_node in first1.next_nodes:
                connect(fork, next_node)
            connect(fork, first2)
            nodes = [fork] + frag1.nodes[1:] + frag2.nodes

            for ind, next_node in enumerate(first1.graph.next):
                graph_fork(fork, next_node, ind)
            graph_fork(fork, frag2.first_graph_node, len(first1.graph.next))
            fork.graph.heights = first1.graph.heights + [frag2.height]

        self.set_operator_range(token, frag1, frag2)

        return Fragment(
            first_node=fork,
            terminal_nodes=frag1.terminal_nodes + frag2.terminal_nodes,
            nodes=nodes,
            begin=frag1.begin,
            end=frag2.end,
            first_graph_node=fork,
            terminal_graph_nodes=frag1.terminal_graph_nodes + frag2.terminal_graph_nodes,
            height=frag1.height + frag2.height,
        )

    def repeat_0_1(self, frag: Fragment, token: Token) -> Fragment:
        """Zero or one: the fork enters the fragment or bypasses it."""
        fork = new_node(token)
        connect(fork, frag.first_node)
        self.set_operator_range(token, frag)
        set_quantifier(frag, '?')

        return Fragment(
            first_node=fork,
            terminal_nodes=frag.terminal_nodes + [fork],
            nodes=[fork] + frag.nodes,
            begin=frag.begin,
            end=token.index,
            first_graph_node=frag.first_graph_node,
            terminal_graph_nodes=frag.terminal_graph_nodes,
            height=frag.height,
        )

    def repeat_0_n(self, frag: Fragment, token: Token) -> Fragment:
        """Zero or more: like zero or one, with a loop back to the fork."""
        fork = new_node(token)
        connect(fork, frag.first_node)
        connect_fragment(frag, fork)
        self.set_operator_range(token, frag)
        set_quantifier(frag, '*')

        return Fragment(
            first_node=fork,
            terminal_nodes=[fork],
            nodes=[fork] + frag.nodes,
            begin=frag.begin,
            end=token.index,
            first_graph_node=frag.first_graph_node,
            terminal_graph_nodes=frag.terminal_graph_nodes,
            height=frag.height,
        )

    def repeat_1_n(self, frag: Fragment, token: Token) -> Fragment:
        """One or more: the fork sits after the fragment, no bypass."""
        fork = new_node(token)
        connect(fork, frag.first_node)
        connect_fragment(frag, fork)
        self.set_operator_range(token, frag)
        set_quantifier(frag, '+')

        return Fragment(
            first_node=frag.first_node,
            terminal_nodes=[fork],
            nodes=frag.nodes + [fork],
            begin=frag.begin,
            end=token.index,
            first_graph_node=frag.first_graph_node,
            terminal_graph_nodes=frag.terminal_graph_nodes,
            height=frag.height,
        )

    def parentheses(self, frag: Fragment, token: Token) -> Fragment:
        """Enclose a fragment between paired open and close nodes."""
        open_node = new_node(token)
        close_node = new_node(
            token,
            label=')',
            type=TokenType.GROUP_CLOSE,
            pos=self.lexemes[token.end].pos,
            index=token.end,
        )
        connect(open_node, frag.first_node)
        connect_fragment(frag, close_node)

        graph_link(open_node, frag.first_graph_node)
        graph_merge(frag.terminal_graph_nodes, close_node)
        open_node.close = close_node

        return Fragment(
            first_node=open_node,
            terminal_nodes=[close_node],
            nodes=[open_node] + frag.nodes + [close_node],
            begin=token.index,
            end=token.end,
            first_graph_node=open_node,
            terminal_graph_nodes=[close_node],
            height=frag.height,
        )

    def unary(self, operation, token: Token) -> None:
        frag = self.fragments.pop()
        self.fragments.append(operation(frag, token))

    def binary_concat(self) -> None:
        frag2 = self.fragments.pop()
        frag1 = self.fragments.pop()
        self.fragments.append(self.concat(frag1, frag2))

    def build(self, rpn: List[Token]) -> List[AutomatonNode]:
        self.push_value(Token(label='>', type=TokenType.FIRST, pos=None, index=None))

        for token in rpn:
            if token.is_value:
                self.push_value(token)
            elif token.type == TokenType.ZERO_OR_ONE:
                self.unary(self.repeat_0_1, token)
            elif token.type == TokenType.ZERO_OR_MORE:
                self.unary(self.repeat_0_n, token)
            elif token.type == TokenType.ONE_OR_MORE:
                self.unary(self.repeat_1_n, token)
            elif token.type == TokenType.ALTERNATION:
                frag2 = self.fragments.pop()
                frag1 = self.fragments.pop()
                self.fragments.append(self.alternate(frag1, frag2, token))
            elif token.type == TokenType.GROUP_OPEN:
                self.unary(self.parentheses, token)
            elif token.type == TokenType.CONCAT:
                self.binary_concat()
            else:
                raise AutomatonError(f"NFA: Invalid token type '{token.type}'")

        # Nothing to attach for an empty regex
        if len(self.fragments) == 2:
            self.binary_concat()

        self.push_value(Token(label='>', type=TokenType.LAST, pos=None, index=None))
        self.binary_concat()

        if len(self.fragments) != 1:
            raise AutomatonError(f"NFA: {len(self.fragments)} fragments left after construction")

        nfa = self.fragments[0].nodes
        for node_index, node in enumerate(nfa):
            node.node_index = node_index
        return nfa


def build_nfa(rpn: List[Token], lexemes: List[Lexeme]) -> List[AutomatonNode]:
    """
    Build the NFA from tokens in reverse polish notation.

    Args:
        rpn: Output of convert_to_rpn()
        lexemes: Lexemes, operator lexemes receive their operand spans

    Returns:
        The automaton nodes, starting with the 'first' sentinel and ending
        with the 'last' sentinel. node_index equals the list position.
    """
    return NFABuilder(lexemes).build(rpn)
