"""
Human readable information on a lexeme, shown when hovering over the regex.
"""
from typing import Dict, List, Optional

from .regex_tokens import Lexeme

TOKEN_INFO: Dict[str, Dict[str, str]] = {
    'charLiteral': {
        'type': 'Value',
        'name': 'Character literal',
        'description': 'Match exactly that character.',
    },
    'escapedChar': {
        'type': 'Value',
        'name': 'Escaped character',
        'description': 'Match exactly that character.',
    },
    '.': {
        'type': 'Value',
        'name': 'Wildcard character',
        'description': 'Match any character.',
    },
    '\\d': {
        'type': 'Value',
        'name': 'Digits character class',
        'description': 'Match a single digit character (0123456789).',
    },
    '\\D': {
        'type': 'Value',
        'name': 'Non-digits character class',
        'description': 'Match a single non-digit character (0123456789).',
    },
    '\\w': {
        'type': 'Value',
        'name': 'Alphanumeric character class',
        'description': 'Match a single alphanumeric character (a-z, A-Z, 0-9, _).',
    },
    '\\W': {
        'type': 'Value',
        'name': 'Non-alphanumeric character class',
        'description': 'Match a single non-alphanumeric character (a-z, A-Z, 0-9, _).',
    },
    '\\s': {
        'type': 'Value',
        'name': 'White space character class',
        'description': 'Match a single white space character (space, \\f, \\n, \\r, \\t, \\v).',
    },
    '\\S': {
        'type': 'Value',
        'name': 'Non white space character class',
        'description': 'Match a single non white space character (space, \\f, \\n, \\r, \\t, \\v).',
    },
    '|': {
        'type': 'Operator',
        'name': 'Alternation operator',
        'description': 'Match either of the items preceding and following.',
    },
    '?': {
        'type': 'Quantifier',
        'name': '0 or 1 quantifier',
        'description': 'Match the preceding item 0 or 1 times.',
    },
    '*': {
        'type': 'Quantifier',
        'name': '0 to any quantifier',
        'description': 'Match the preceding item 0 or more times.',
    },
    '+': {
        'type': 'Quantifier',
        'name': '1 to any quantifier',
        'description': 'Match the preceding item 1 or more times.',
    },
    '(': {
        'type': 'Delimiter',
        'name': 'Left parenthesis',
        'description': 'Open a parentheses pair to manage precedence and set a capture group.',
    },
    ')': {
        'type': 'Delimiter',
        'name': 'Right parenthesis',
        'description': 'Close a parentheses pair to manage precedence and set a capture group.',
    },
    '[': {
        'type': 'Delimiter',
        'name': 'Left bracket',
        'description': 'Open a bracketed character class.',
    },
    ']': {
        'type': 'Delimiter',
        'name': 'Right bracket',
        'description': 'Close a bracketed character class.',
    },
    'bracketChar': {
        'type': 'Value',
        'name': 'Character literal (brackets)',
        'description': 'Add an alternative in the bracketed expression.',
    },
    'bracketRangeLow': {
        'type': 'Value',
        'name': 'Range beginning',
        'description': 'Define the beginning of a character range in a bracketed expression.',
    },
    'bracketRangeHigh': {
        'type': 'Value',
        'name': 'Range ending',
        'description': 'Define the ending of a character range in a bracketed expression.',
    },
    '-': {
        'type': 'Operator',
        'name': 'Range operator',
        'description': 'Add a character range as alternatives in a bracketed expression.',
        'warning': 'Has to be neither at the end or beginning of the expression.',
    },
    '^': {
        'type': 'Operator',
        'name': 'Negation operator',
        'description': 'Negate a bracket expression to match characters not in it.',
        'warning': 'Has to be positioned as the first character in the expression.',
    },
}

DEFAULT_INFO = {
    'label': '?',
    'name': 'Questions ...',
    'description': 'Hover over any character in the regex to get information on it.',
}


def _operand(lexemes: List[Lexeme], begin: Optional[int], end: Optional[int]) -> Optional[str]:
    if begin is None or end is None:
        return None
    return ''.join(lexeme.label for lexeme in lexemes[begin:end + 1])


def get_token_info(lexemes: List[Lexeme], index: int) -> Dict[str, str]:
    """
    Describe the lexeme at index.

    Besides the static description, the result holds the text covered by
    the lexeme: 'range' inside brackets or parentheses, 'left' and 'right'
    for the operands of quantifiers and alternations.
    """
    if index < 0 or index >= len(lexemes):
        return dict(DEFAULT_INFO)

    lexeme = lexemes[index]
    info = {'label': lexeme.label}
    info.update(TOKEN_INFO.get(lexeme.type) or TOKEN_INFO.get(lexeme.label, {}))

    spans = {
        'range': (None if lexeme.begin is None else lexeme.begin + 1,
                  None if lexeme.end is None else lexeme.end - 1),
        'left': (lexeme.begin_l, lexeme.end_l),
        'right': (lexeme.begin_r, lexeme.end_r),
    }
    for name, (begin, end) in spans.items():
        operand = _operand(lexemes, begin, end)
        if operand is not None:
            info[name] = operand

    return info
