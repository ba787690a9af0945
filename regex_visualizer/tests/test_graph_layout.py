import unittest
from regex_visualizer.graph_layout import build_graph, fork_delta_y
from regex_visualizer.nfa_builder import build_nfa
from regex_visualizer.regex_parser import parse
from regex_visualizer.regex_rpn import convert_to_rpn
from regex_visualizer.regex_validation import validate


def label_string(items):
    return ''.join(item.label for item in items)


def run_layout(regex):
    lexemes, tokens, warnings = parse(regex)
    valid_tokens = validate(tokens, lexemes, warnings)
    rpn = convert_to_rpn(valid_tokens, lexemes)
    nfa = build_nfa(rpn, lexemes)
    return nfa, build_graph(nfa)


class TestGraphLayout(unittest.TestCase):

    def assertGraph(self, regex, expected, nodes=(), forks=(), merges=()):
        _, graph = run_layout(regex)
        self.assertEqual(label_string(graph.nodes), expected)

        for label, x, y in nodes:
            node = [node for node in graph.nodes if node.label == label][0]
            self.assertEqual(tuple(node.coord), (x, y), f"{regex}: {label}")

        # Forks and merges are identified by their first coordinate
        for expected_shapes, shapes in ((forks, graph.forks), (merges, graph.merges)):
            for coords in expected_shapes:
                shape = [shape for shape in shapes if tuple(shape[0]) == coords[0]][0]
                self.assertEqual([tuple(coord) for coord in shape], list(coords), regex)
        return graph

    def test_fork_delta_y(self):
        self.assertEqual(fork_delta_y([1, 1], 0), -0.5)
        self.assertEqual(fork_delta_y([1, 1], 1), 0.5)
        self.assertEqual(fork_delta_y([1, 1, 1], 0), -1)
        self.assertEqual(fork_delta_y([1, 1, 1], 1), 0)
        self.assertEqual(fork_delta_y([2, 3], 0), -1.25)
        self.assertEqual(fork_delta_y([2, 3], 1), 1.25)

    def test_straight_line(self):
        graph = self.assertGraph('abc', '>abc>', nodes=[('a', 1, 0), ('b', 2, 0), ('c', 3, 0)])
        self.assertEqual(len(graph.links), 4)
        self.assertEqual(graph.links[0], ((0, 0), (1, 0)))
        self.assertEqual(graph.forks, [])
        self.assertEqual(graph.merges, [])

    def test_alternation(self):
        self.assertGraph(
            'ab|c', '>|abc>',
            nodes=[('a', 1, -0.5), ('b', 2, -0.5), ('c', 1, 0.5)],
            forks=[[(0, 0), (1, -0.5), (1, 0.5)]],
            merges=[[(3, 0), (2, -0.5), (1, 0.5)]],
        )

    def test_alternation_in_group(self):
        self.assertGraph(
            '(a|bc)d', '>(|abc)d>',
            nodes=[('(', 1, 0), ('a', 2, -0.5), ('b', 2, 0.5), ('c', 3, 0.5), (')', 4, 0), ('d', 5, 0)],
            forks=[[(1, 0), (2, -0.5), (2, 0.5)]],
            merges=[[(4, 0), (2, -0.5), (3, 0.5)]],
        )

    def test_quantifiers_are_hidden(self):
        """Test that quantifier nodes are left out of the display"""
        graph = self.assertGraph(
            '(a?|b*|(cd)+)?e', '>(|ab(cd))e>',
            nodes=[
                ('(', 1, 0), ('a', 2, -1), ('b', 2, 0), ('c', 3, 1),
                ('d', 4, 1), (')', 5, 1), ('e', 7, 0),
            ],
            forks=[[(1, 0), (2, -1), (2, 0), (2, 1)]],
            merges=[[(6, 0), (2, -1), (2, 0), (5, 1)]],
        )
        quantifiers = {node.label: node.quantifier for node in graph.nodes if node.quantifier}
        self.assertEqual(quantifiers['a'], '?')
        self.assertEqual(quantifiers['b'], '*')
        self.assertIn('quantifier', graph.nodes[1].classes)

        # Both quantified groups are outlined
        self.assertEqual(len(graph.parentheses), 2)
        self.assertIn(((1, 0), (6, 0)), graph.parentheses)
        self.assertIn(((2, 1), (5, 1)), graph.parentheses)

    def test_nested_alternations(self):
        self.assertGraph(
            '(a|b)(c|d|e)|f(g(h|i)j)k', '>|(|ab)(|cde)f(g(|hi)j)k>',
            nodes=[
                ('a', 2, -1.75), ('b', 2, -0.75),
                ('c', 5, -2.25), ('d', 5, -1.25), ('e', 5, -0.25),
                ('f', 1, 1.25), ('g', 3, 1.25), ('h', 5, 0.75), ('i', 5, 1.75),
                ('j', 7, 1.25), ('k', 9, 1.25),
            ],
            forks=[
                [(0, 0), (1, -1.25), (1, 1.25)],
                [(1, -1.25), (2, -1.75), (2, -0.75)],
                [(4, -1.25), (5, -2.25), (5, -1.25), (5, -0.25)],
                [(4, 1.25), (5, 0.75), (5, 1.75)],
            ],
            merges=[
                [(10, 0), (6, -1.25), (9, 1.25)],
                [(3, -1.25), (2, -1.75), (2, -0.75)],
                [(6, -1.25), (5, -2.25), (5, -1.25), (5, -0.25)],
                [(6, 1.25), (5, 0.75), (5, 1.75)],
            ],
        )

    def test_graph_node_indexes(self):
        """Test that value and delimiter nodes know their display node"""
        nfa, graph = run_layout('a*b')
        for node in nfa:
            if node.type == '*':
                self.assertIsNone(node.graph_node_index)
            else:
                self.assertEqual(graph.nodes[node.graph_node_index].label, node.label)

    def test_node_classes(self):
        _, graph = run_layout('a\\d|(b)')
        classes = [node.classes for node in graph.nodes]
        self.assertEqual(classes, ['first', 'operator', 'value', 'value-special', 'delimiter', 'value', 'delimiter', 'last'])

    def test_to_dict(self):
        _, graph = run_layout('a?')
        data = graph.to_dict()
        self.assertEqual(data['nodes'][1], {
            'label': 'a',
            'coord': [1, 0],
            'classes': 'value quantifier',
            'runClasses': '',
            'quantifier': '?',
        })
        self.assertEqual(data['links'], [[[0, 0], [1, 0]], [[1, 0], [2, 0]]])
        self.assertEqual(data['forks'], [])
