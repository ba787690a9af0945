"""
Lexical analysis of a regex.

parse() returns lexemes, tokens and diagnostics:
    - Lexemes are used for syntax highlighting, one per source character
      (an escape sequence is a single two-character lexeme).
    - Tokens are used to build the NFA. A whole bracket expression is one
      token spanning several lexemes.
    - Parsing raises two kinds of diagnostics: unclosed brackets and a
      trailing backslash.
"""
from typing import Dict, List, Optional, Tuple

from .regex_tokens import (
    DIGITS, SPACES, WORDS, Lexeme, Match, Token, TokenType, add_lexeme, match_all,
    match_char, match_in, match_not_in, operator_token, value_token,
)
from .regex_warnings import Diagnostics, warn

# Two-character escaped classes
CHAR_CLASSES: Dict[str, Match] = {
    '\\d': match_in(DIGITS),
    '\\D': match_not_in(DIGITS),
    '\\w': match_in(WORDS),
    '\\W': match_not_in(WORDS),
    '\\s': match_in(SPACES),
    '\\S': match_not_in(SPACES),
}

OPERATORS = {
    '|': TokenType.ALTERNATION,
    '?': TokenType.ZERO_OR_ONE,
    '*': TokenType.ZERO_OR_MORE,
    '+': TokenType.ONE_OR_MORE,
    '(': TokenType.GROUP_OPEN,
    ')': TokenType.GROUP_CLOSE,
}


class RegexLexer:
    """Scans a regex left to right into lexemes and tokens."""

    def __init__(self, regex: str):
        self.regex = regex
        self.pos = 0
        self.lexemes: List[Lexeme] = []
        self.tokens: List[Token] = []
        self.warnings: Diagnostics = {}

    def peek(self, offset: int = 0) -> Optional[str]:
        """Look at a character without consuming."""
        index = self.pos + offset
        return self.regex[index] if index < len(self.regex) else None

    def eat(self, type_: str) -> None:
        """Consume the current character as a lexeme of the given type."""
        add_lexeme(self.lexemes, self.regex[self.pos], type_, self.pos)
        self.pos += 1

    def try_eat(self, label: str, type_: str) -> bool:
        if self.peek() == label:
            self.eat(type_)
            return True
        return False

    def read_member(self, type_: str, members: Dict[str, None]) -> None:
        """Consume the current character as a bracket expression member."""
        members[self.regex[self.pos]] = None
        self.eat(type_)

    def try_read_member(self, label: str, members: Dict[str, None]) -> bool:
        if self.peek() == label:
            self.read_member('bracketChar', members)
            return True
        return False

    def try_read_range(self, members: Dict[str, None]) -> bool:
        """Read a dash-delimited character range such as a-z."""
        if len(self.regex) - self.pos < 3 or self.peek(1) != '-' or self.peek(2) == ']':
            return False

        low = ord(self.regex[self.pos])
        high = ord(self.regex[self.pos + 2])
        for code in range(low, high + 1):
            members[chr(code)] = None

        self.eat('bracketRangeLow')
        self.eat('-')
        self.eat('bracketRangeHigh')
        return True

    def read_bracket_expression(self) -> Token:
        """
        Read a bracket expression starting at the current '['.

        An unclosed expression is finalized with the members read so far and
        raises a single diagnostic at the opening bracket.
        """
        start = self.pos
        begin = len(self.lexemes)
        # Insertion-ordered set of member characters
        members: Dict[str, None] = {}

        self.eat('[')
        negate = self.try_eat('^', '^')

        # Special characters are literals at the beginning
        self.try_read_member(']', members) or self.try_read_member('-', members)

        # Try a character range, otherwise read a character literal
        while self.pos < len(self.regex) and self.regex[self.pos] != ']':
            self.try_read_range(members) or self.read_member('bracketChar', members)

        label = self.regex[start:self.pos] + ']'
        end = len(self.lexemes)

        if self.peek() == ']':
            self.eat(']')
            closing: Optional[Lexeme] = self.lexemes[end]
        else:
            # Syntax error: open bracket with no closing
            end -= 1
            closing = None
            warn('[', start, begin, self.lexemes, self.warnings)

        for lexeme in (self.lexemes[begin], closing):
            if lexeme is not None:
                lexeme.begin = begin
                lexeme.end = end
                lexeme.negate = negate
                lexeme.matches = ''.join(members)

        token = value_token(
            label,
            TokenType.BRACKET_CLASS,
            match_not_in(members) if negate else match_in(members),
            start,
            begin,
        )
        token.begin = begin
        token.end = end
        token.negate = negate
        return token

    def next_token(self) -> Token:
        """Classify and consume the next token."""
        ch = self.regex[self.pos]
        pair = self.regex[self.pos:self.pos + 2]
        pos = self.pos
        index = len(self.lexemes)

        # Bracket expression
        if ch == '[':
            return self.read_bracket_expression()

        # Operators and wildcard
        if ch in OPERATORS:
            token = operator_token(OPERATORS[ch], pos, index)
        elif ch == '.':
            token = value_token('.', TokenType.WILDCARD, match_all, pos, index)

        # Character classes
        elif pair in CHAR_CLASSES:
            token = value_token(pair, TokenType.CHAR_CLASS, CHAR_CLASSES[pair], pos, index)

        # Escaped character
        elif ch == '\\' and len(pair) == 2:
            token = value_token(pair, TokenType.ESCAPED_CHAR, match_char(pair[1]), pos, index)

        # Syntax error: trailing backslash
        elif ch == '\\':
            token = value_token(ch, TokenType.ESCAPED_CHAR, match_all, pos, index)
            token.invalid = True
            add_lexeme(self.lexemes, token.label, token.type, pos)
            self.pos += 1
            warn('\\E', pos, index, self.lexemes, self.warnings)
            return token

        # Character literal
        else:
            token = value_token(ch, TokenType.CHAR_LITERAL, match_char(ch), pos, index)

        add_lexeme(self.lexemes, token.label, token.type, pos)
        self.pos += len(token.label)
        return token

    def parse(self) -> Tuple[List[Lexeme], List[Token], Diagnostics]:
        while self.pos < len(self.regex):
            self.tokens.append(self.next_token())
        return self.lexemes, self.tokens, self.warnings


def parse(regex: str) -> Tuple[List[Lexeme], List[Token], Diagnostics]:
    """
    Parse a regex into lexemes, tokens and diagnostics.

    Parsing never fails: malformed input yields diagnostics and a best-effort
    token stream. Joining the lexeme labels reproduces the input exactly.

    Args:
        regex: The source string

    Returns:
        (lexemes, tokens, warnings)
    """
    return RegexLexer(regex).parse()
