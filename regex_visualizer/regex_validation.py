"""
Structural validation of the parsed tokens.

validate() returns the tokens that survived validation and mutates the
lexemes and diagnostics through warn(). Invalid tokens are flagged, never
removed. The passes are stack-based rather than recursive so that nesting
depth is unbounded.
"""
from dataclasses import dataclass
from typing import List, Optional

from .regex_tokens import Lexeme, Token, TokenType, get_paren_close
from .regex_warnings import Diagnostics, warn


def validate_parentheses(tokens: List[Token], lexemes: List[Lexeme], warnings: Diagnostics) -> None:
    """
    Match opening and closing parentheses.

    Unmatched closing parentheses are invalidated. Unclosed opening ones get
    an added closing token at the end; their diagnostic is raised by
    validate_empty_values(), which knows whether the group is empty.
    """
    opened: List[Token] = []

    for token in tokens:
        if token.type == TokenType.GROUP_OPEN:
            opened.append(token)
        elif token.type == TokenType.GROUP_CLOSE:
            # No opening parenthesis
            if not opened:
                warn(')', token.pos, token.index, lexemes, warnings)
                token.invalid = True
                continue
            opened.pop()

    while opened:
        open_token = opened.pop()
        tokens.append(get_paren_close(open_token.pos, open_token.index))


@dataclass
class _GroupState:
    term_is_empty: bool
    expr_is_empty: bool
    prev_alternation: Optional[Token]
    open: Token


def _warn_trailing_alternation(alternation: Token, lexemes: List[Lexeme], warnings: Diagnostics) -> None:
    warn('|E', alternation.pos, alternation.index, lexemes, warnings)
    alternation.invalid = True


def validate_empty_values(tokens: List[Token], lexemes: List[Lexeme], warnings: Diagnostics) -> None:
    """Invalidate operators applied to empty operands and empty groups."""
    stack: List[_GroupState] = []
    expr_is_empty = True
    term_is_empty = True
    prev_alternation: Optional[Token] = None

    for token in tokens:
        if token.invalid:
            continue

        if token.is_value:
            expr_is_empty = False
            term_is_empty = False

        elif token.type == TokenType.ALTERNATION:
            if term_is_empty:
                warn('E|', token.pos, token.index, lexemes, warnings)
                token.invalid = True
                continue
            term_is_empty = True
            prev_alternation = token

        elif token.is_quantifier:
            # Empty quantifier operand
            if term_is_empty:
                warn('E*', token.pos, token.index, lexemes, warnings, label=token.label)
                token.invalid = True

        elif token.type == TokenType.GROUP_OPEN:
            stack.append(_GroupState(term_is_empty, expr_is_empty, prev_alternation, token))
            expr_is_empty = True
            term_is_empty = True
            prev_alternation = None

        elif token.type == TokenType.GROUP_CLOSE:
            state = stack.pop()
            open_token = state.open

            if expr_is_empty and token.added:
                # Empty and unclosed parenthesis
                warn('(E', open_token.pos, open_token.index, lexemes, warnings)
                open_token.invalid = True
                token.invalid = True
            elif expr_is_empty:
                # Empty pair of parentheses
                warn('()', token.pos, token.index, lexemes, warnings)
                lexemes[open_token.index].invalid = True
                open_token.invalid = True
                token.invalid = True
            elif token.added:
                # Unclosed parenthesis
                warn('(', open_token.pos, open_token.index, lexemes, warnings)

            # Empty term before closing parenthesis
            if prev_alternation is not None and term_is_empty:
                _warn_trailing_alternation(prev_alternation, lexemes, warnings)

            term_is_empty = state.term_is_empty and expr_is_empty
            expr_is_empty = state.expr_is_empty and expr_is_empty
            prev_alternation = state.prev_alternation

    # Empty term at end of regex
    if prev_alternation is not None and term_is_empty:
        _warn_trailing_alternation(prev_alternation, lexemes, warnings)


def collapse_quantifiers(first: str, second: str) -> str:
    """Type of the single quantifier equivalent to two chained ones."""
    pair = first + second
    if pair == '??':
        return '?'
    if pair == '++':
        return '+'
    return '*'


def validate_quantifiers(tokens: List[Token], lexemes: List[Lexeme], warnings: Diagnostics) -> None:
    """
    Fold chains of quantifiers into the first one.

    The kept token's type is rewritten before the next comparison, so
    longer chains fold left to right.
    """
    prev_token: Optional[Token] = None

    for token in tokens:
        if token.invalid:
            continue

        if prev_token is not None and prev_token.is_quantifier and token.is_quantifier:
            label = prev_token.label + token.label
            replacement = TokenType(collapse_quantifiers(prev_token.label, token.label))

            warn('**', token.pos, token.index, lexemes, warnings, label=label)
            token.invalid = True
            prev_token.label = replacement.value
            prev_token.type = replacement
        else:
            prev_token = token


def validate(tokens: List[Token], lexemes: List[Lexeme], warnings: Diagnostics) -> List[Token]:
    """
    Validate the parsed tokens.

    Args:
        tokens: Tokens from parse(), mutated in place (flags, added closings)
        lexemes: Lexemes from parse(), invalid ones get flagged
        warnings: Diagnostics collection

    Returns:
        The valid tokens, in order
    """
    validate_parentheses(tokens, lexemes, warnings)
    validate_empty_values(tokens, lexemes, warnings)
    validate_quantifiers(tokens, lexemes, warnings)

    return [token for token in tokens if not token.invalid]
