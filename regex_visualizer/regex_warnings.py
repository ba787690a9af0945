"""
Diagnostics raised while compiling a regex.

Diagnostics are aggregated by category, each category holding the list of
source positions where it occurred. Two categories come from the parser
('[' and '\\E'), all others from the validator.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .regex_tokens import Lexeme


@dataclass
class Diagnostic:
    type: str
    label: str
    issue: str
    msg: str
    count: int = 0
    positions: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'type': self.type,
            'label': self.label,
            'issue': self.issue,
            'msg': self.msg,
            'count': self.count,
            'positions': list(self.positions),
        }


Diagnostics = Dict[str, Diagnostic]

# Category key -> (label, issue, remediation)
WARNING_CATEGORIES: Dict[str, tuple] = {
    '[': ('[', 'An open bracket has not been closed',
          'The parser is adding an implicit closing bracket.'),
    '\\E': ('\\', 'No character after backslash',
            'The parser is ignoring the backslash.'),
    '(': ('(', 'An open parenthesis has not been closed',
          'The parser is adding an implicit closing parenthesis.'),
    ')': (')', 'A closing parenthesis has no match',
          'The parser is ignoring the closing parenthesis.'),
    '**': ('', 'Redundant quantifiers',
           'The parser is simplifying the quantifiers to a single one.'),
    'E*': ('', 'A quantifier follows an empty value',
           'The parser is ignoring the quantifier.'),
    'E|': ('|', 'An alternation follows an empty value',
           'The parser is ignoring the alternation.'),
    '|E': ('|', 'An alternation precedes an empty value',
           'The parser is ignoring the alternation.'),
    '()': ('()', 'A pair of parentheses contains no value',
           'The parser is ignoring the parentheses.'),
    '(E': ('(', 'An open parenthesis has not been closed and is empty',
           'The parser is ignoring the parenthesis.'),
}


def warn(category: str, pos: int, index: int, lexemes: List[Lexeme],
         warnings: Diagnostics, label: Optional[str] = None) -> None:
    """
    Record one occurrence of a defect and flag the offending lexeme.

    Args:
        category: Key in WARNING_CATEGORIES
        pos: Source position of the defect
        index: Index of the lexeme to flag as invalid
        lexemes: The lexeme array
        warnings: The diagnostics collection, mutated in place
        label: Overrides the category label (quantifier categories)
    """
    lexemes[index].invalid = True

    diagnostic = warnings.get(category)
    if diagnostic is None:
        static_label, issue, msg = WARNING_CATEGORIES[category]
        diagnostic = Diagnostic(
            type=category,
            label=static_label if label is None else label,
            issue=issue,
            msg=msg,
        )
        warnings[category] = diagnostic

    diagnostic.count += 1
    diagnostic.positions.append(pos)


def count_warnings(warnings: Diagnostics) -> int:
    """Total number of recorded occurrences across all categories."""
    return sum(len(diagnostic.positions) for diagnostic in warnings.values())
