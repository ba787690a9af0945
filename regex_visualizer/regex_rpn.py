"""
Conversion of validated tokens to reverse polish notation.

convert_to_rpn() is a shunting-yard pass that also inserts the implicit
concatenation operators. It stamps begin/end spans onto parenthesis lexemes
once their closing parenthesis is found.
"""
from typing import List, Optional

from .regex_tokens import AutomatonError, Lexeme, Token, TokenType, get_concat


def _precedes_implicit_concat(token: Optional[Token]) -> bool:
    """True when a value or an opening parenthesis following token needs a concatenation."""
    return token is not None and token.type not in (TokenType.ALTERNATION, TokenType.GROUP_OPEN)


def _transfer_operator(type_: TokenType, rpn: List[Token], operators: List[Token]) -> None:
    """Move the stacked operator to the output if it is at the top."""
    if operators and operators[-1].type == type_:
        rpn.append(operators.pop())


def _flush_binary_operators(rpn: List[Token], operators: List[Token]) -> None:
    _transfer_operator(TokenType.CONCAT, rpn, operators)
    _transfer_operator(TokenType.ALTERNATION, rpn, operators)


def _concat(rpn: List[Token], operators: List[Token]) -> None:
    _transfer_operator(TokenType.CONCAT, rpn, operators)
    operators.append(get_concat())


def convert_to_rpn(tokens: List[Token], lexemes: List[Lexeme]) -> List[Token]:
    """
    Convert validated tokens to postfix order.

    Concatenation binds tighter than alternation. Quantifiers are postfix
    already and go straight to the output. A group is emitted as a unary '('
    operator after its content.

    Args:
        tokens: Valid tokens in source order
        lexemes: Lexemes, parenthesis spans are written to them

    Returns:
        Tokens in reverse polish notation
    """
    rpn: List[Token] = []
    operators: List[Token] = []
    prev_token: Optional[Token] = None

    for token in tokens:
        if token.invalid:
            continue

        if token.is_value:
            if _precedes_implicit_concat(prev_token):
                _concat(rpn, operators)
            rpn.append(token)

        elif token.type == TokenType.ALTERNATION:
            _flush_binary_operators(rpn, operators)
            operators.append(token)

        elif token.is_quantifier:
            rpn.append(token)

        elif token.type == TokenType.GROUP_OPEN:
            if _precedes_implicit_concat(prev_token):
                _concat(rpn, operators)
            operators.append(token)

        elif token.type == TokenType.GROUP_CLOSE:
            _flush_binary_operators(rpn, operators)
            if not operators or operators[-1].type != TokenType.GROUP_OPEN:
                raise AutomatonError(f"RPN: Unbalanced parenthesis at position {token.pos}")
            open_token = operators.pop()
            open_token.end = token.index
            rpn.append(open_token)

            for index in (open_token.index, token.index):
                lexemes[index].begin = open_token.index
                lexemes[index].end = token.index

        else:
            raise AutomatonError(f"RPN: Invalid token type '{token.type}'")

        prev_token = token

    _flush_binary_operators(rpn, operators)

    return rpn
