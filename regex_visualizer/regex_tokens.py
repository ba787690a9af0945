from dataclasses import dataclass
from enum import Enum
from typing import Callable, Container, Dict, List, Optional
import string

Match = Callable[[str], bool]


class TokenType(str, Enum):
    """The closed set of token kinds flowing through the compiler."""

    # Values
    CHAR_LITERAL = 'charLiteral'
    ESCAPED_CHAR = 'escapedChar'
    CHAR_CLASS = 'charClass'
    BRACKET_CLASS = 'bracketClass'
    WILDCARD = '.'

    # Operators
    ALTERNATION = '|'
    ZERO_OR_ONE = '?'
    ZERO_OR_MORE = '*'
    ONE_OR_MORE = '+'
    GROUP_OPEN = '('
    GROUP_CLOSE = ')'
    CONCAT = '~'

    # Sentinels
    FIRST = 'first'
    LAST = 'last'

    def __str__(self) -> str:
        return self.value


VALUE_TYPES = frozenset({
    TokenType.CHAR_LITERAL,
    TokenType.ESCAPED_CHAR,
    TokenType.CHAR_CLASS,
    TokenType.BRACKET_CLASS,
    TokenType.WILDCARD,
})

QUANTIFIER_TYPES = frozenset({
    TokenType.ZERO_OR_ONE,
    TokenType.ZERO_OR_MORE,
    TokenType.ONE_OR_MORE,
})

DIGITS = frozenset(string.digits)
WORDS = frozenset(string.ascii_letters + string.digits + '_')
SPACES = frozenset(' \f\n\r\t\v')

# Lexeme type -> style tag used for syntax highlighting
DISPLAY_TYPES: Dict[str, str] = {
    'charLiteral': 'value',
    'escapedChar': 'value',
    'charClass': 'value-special',
    'bracketChar': 'value',
    'bracketRangeLow': 'value-special',
    'bracketRangeHigh': 'value-special',
    '.': 'value-special',
    '?': 'quantifier',
    '*': 'quantifier',
    '+': 'quantifier',
    '|': 'operator',
    '(': 'delimiter',
    ')': 'delimiter',
    '[': 'delimiter',
    ']': 'delimiter',
    '-': 'value-special',
    '^': 'operator',
}


@dataclass
class Lexeme:
    """
    One display unit of the source string.

    Field ownership by stage:
        - parser: everything up to ``matches``
        - validator: ``invalid``
        - RPN converter: ``begin``/``end`` of parentheses
        - NFA builder: ``begin_l``/``end_l``/``begin_r``/``end_r``
    """
    label: str
    type: str
    pos: int
    index: int
    display_type: str
    invalid: bool = False
    begin: Optional[int] = None
    end: Optional[int] = None
    negate: Optional[bool] = None
    matches: Optional[str] = None
    begin_l: Optional[int] = None
    end_l: Optional[int] = None
    begin_r: Optional[int] = None
    end_r: Optional[int] = None


@dataclass(eq=False)
class Token:
    """One semantic unit. Implicit concatenation tokens have no position or index."""
    label: str
    type: TokenType
    pos: Optional[int]
    index: Optional[int]
    match: Optional[Match] = None
    invalid: bool = False
    added: bool = False
    begin: Optional[int] = None
    end: Optional[int] = None
    negate: Optional[bool] = None

    @property
    def is_value(self) -> bool:
        return self.type in VALUE_TYPES

    @property
    def is_quantifier(self) -> bool:
        return self.type in QUANTIFIER_TYPES


def add_lexeme(lexemes: List[Lexeme], label: str, type_: str, pos: int) -> Lexeme:
    """Append a lexeme with the next sequential index."""
    lexeme = Lexeme(
        label=label,
        type=str(type_),
        pos=pos,
        index=len(lexemes),
        display_type=DISPLAY_TYPES[str(type_)],
    )
    lexemes.append(lexeme)
    return lexeme


# Match predicates

def match_all(ch: str) -> bool:
    return True


def match_char(label: str) -> Match:
    return lambda ch: ch == label


def match_in(members: Container[str]) -> Match:
    return lambda ch: ch in members


def match_not_in(members: Container[str]) -> Match:
    return lambda ch: ch not in members


# Token factories

def value_token(label: str, type_: TokenType, match: Match, pos: int, index: int) -> Token:
    return Token(label=label, type=type_, pos=pos, index=index, match=match)


def operator_token(type_: TokenType, pos: Optional[int] = None, index: Optional[int] = None) -> Token:
    return Token(label=type_.value, type=type_, pos=pos, index=index)


def get_concat() -> Token:
    """Synthetic implicit concatenation operator."""
    return operator_token(TokenType.CONCAT)


def get_paren_close(pos: int, index: int) -> Token:
    """Closing parenthesis added to balance an unclosed group."""
    close = operator_token(TokenType.GROUP_CLOSE, pos, index)
    close.added = True
    return close


class AutomatonError(RuntimeError):
    """Raised when a compiler stage receives input it should never see."""
