from typing import List

from .regex_tokens import Token, TokenType


def generate_regex_from_rpn(rpn: List[Token]) -> str:
    """
    Rebuild a regex string from its RPN tokens.

    The result is what was actually compiled: invalid tokens are gone and
    added closing parentheses and brackets are present. For a valid regex
    it is the input string itself.
    """
    stack: List[str] = []

    for token in rpn:
        if token.is_value:
            stack.append(token.label)
        elif token.is_quantifier:
            stack.append(stack.pop() + token.label)
        elif token.type == TokenType.ALTERNATION:
            right = stack.pop()
            left = stack.pop()
            stack.append(f"{left}|{right}")
        elif token.type == TokenType.CONCAT:
            right = stack.pop()
            left = stack.pop()
            stack.append(left + right)
        elif token.type == TokenType.GROUP_OPEN:
            stack.append(f"({stack.pop()})")

    return stack[0] if stack else ''
