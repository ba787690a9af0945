"""Conversion of compiled regex structures to JSON-ready dictionaries."""
from typing import Dict, List

from .nfa_builder import AutomatonNode
from .regex_compiler import CompiledRegex
from .regex_tokens import Lexeme, Token

LEXEME_SPANS = ('begin', 'end', 'negate', 'matches', 'begin_l', 'end_l', 'begin_r', 'end_r')


def lexeme_to_dict(lexeme: Lexeme) -> Dict:
    data = {
        'label': lexeme.label,
        'type': lexeme.type,
        'pos': lexeme.pos,
        'index': lexeme.index,
        'displayType': lexeme.display_type,
        'invalid': lexeme.invalid,
    }
    # Optional spans are only sent when set
    for name in LEXEME_SPANS:
        value = getattr(lexeme, name)
        if value is not None:
            data[name] = value
    return data


def token_to_dict(token: Token) -> Dict:
    data = {
        'label': token.label,
        'type': token.type.value,
        'pos': token.pos,
        'index': token.index,
    }
    # Bracket expressions only
    if token.negate is not None:
        data['negate'] = token.negate
    return data


def nfa_to_list(nfa: List[AutomatonNode]) -> List[Dict]:
    return [
        {
            'label': node.label,
            'type': node.type.value,
            'nodeIndex': node.node_index,
            'graphNodeIndex': node.graph_node_index,
            'next': [next_node.node_index for next_node in node.next_nodes],
        }
        for node in nfa
    ]


def compiled_regex_to_dict(compiled: CompiledRegex) -> Dict:
    return {
        'regex': compiled.regex,
        'lexemes': [lexeme_to_dict(lexeme) for lexeme in compiled.lexemes],
        'rpn': [token_to_dict(token) for token in compiled.rpn],
        'nfa': nfa_to_list(compiled.nfa),
        'graph': compiled.graph.to_dict(),
        'warnings': [diagnostic.to_dict() for diagnostic in compiled.warnings.values()],
        'autofix': compiled.autofix(),
    }
