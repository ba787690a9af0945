import unittest
from regex_visualizer.regex_parser import parse
from regex_visualizer.regex_warnings import count_warnings


def label_string(items):
    return ''.join(item.label for item in items)


def token_at(tokens, index):
    """The token whose first lexeme is at index."""
    matching = [token for token in tokens if token.index == index]
    assert len(matching) == 1
    return matching[0]


class TestRegexParser(unittest.TestCase):

    def assertParsed(self, regex, lexeme_count, token_count, warning_count):
        lexemes, tokens, warnings = parse(regex)
        self.assertEqual(len(lexemes), lexeme_count)
        self.assertEqual(len(tokens), token_count)
        self.assertEqual(label_string(lexemes), regex)
        self.assertEqual(count_warnings(warnings), warning_count)
        return lexemes, tokens, warnings

    def test_empty_regex(self):
        """Test that an empty regex has no lexemes, tokens or warnings"""
        self.assertParsed('', 0, 0, 0)

    def test_character_literals(self):
        """Test plain characters"""
        lexemes, tokens, _ = self.assertParsed('abc', 3, 3, 0)

        for index, label in enumerate('abc'):
            self.assertEqual(lexemes[index].label, label)
            self.assertEqual(lexemes[index].type, 'charLiteral')
            self.assertEqual(lexemes[index].pos, index)
            self.assertEqual(lexemes[index].display_type, 'value')

        token = token_at(tokens, 0)
        self.assertEqual(token.type, 'charLiteral')
        self.assertTrue(token.match('a'))
        self.assertFalse(token.match('x'))

    def test_wildcard(self):
        """Test that the wildcard matches anything"""
        lexemes, tokens, _ = self.assertParsed('a.c', 3, 3, 0)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '.')
        self.assertEqual(token.type, '.')
        self.assertTrue(token.match('a'))
        self.assertTrue(token.match('.'))
        self.assertEqual(lexemes[1].display_type, 'value-special')

    def test_character_classes(self):
        """Test the escaped character classes and their negations"""
        _, tokens, _ = self.assertParsed('\\d\\d\\d', 3, 3, 0)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '\\d')
        self.assertEqual(token.type, 'charClass')
        self.assertEqual(token.pos, 2)
        self.assertTrue(token.match('0'))
        self.assertFalse(token.match('a'))

        _, tokens, _ = parse('\\w\\W\\s\\S\\D')
        word, not_word, space, not_space, not_digit = tokens
        self.assertTrue(word.match('_'))
        self.assertTrue(word.match('Z'))
        self.assertFalse(word.match('-'))
        self.assertTrue(not_word.match('-'))
        self.assertTrue(space.match(' '))
        self.assertTrue(space.match('\t'))
        self.assertFalse(space.match('f'))
        self.assertTrue(not_space.match('f'))
        self.assertTrue(not_digit.match('a'))
        self.assertFalse(not_digit.match('5'))

    def test_escaped_characters(self):
        """Test that an escaped character is one lexeme matching the character"""
        lexemes, tokens, _ = self.assertParsed('\\+\\+\\+', 3, 3, 0)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '\\+')
        self.assertEqual(token.type, 'escapedChar')
        self.assertEqual(token.pos, 2)
        self.assertTrue(token.match('+'))
        self.assertFalse(token.match('a'))
        self.assertEqual(lexemes[1].label, '\\+')

    def test_operators(self):
        """Test operators following escaped characters"""
        lexemes, tokens, _ = self.assertParsed('\\a|b', 3, 3, 0)
        token = token_at(tokens, 1)
        self.assertEqual(token.type, '|')
        self.assertEqual(token.pos, 2)
        self.assertIsNone(token.match)
        self.assertEqual(lexemes[1].display_type, 'operator')

        _, tokens, _ = self.assertParsed('\\ab*', 3, 3, 0)
        token = token_at(tokens, 2)
        self.assertEqual(token.type, '*')
        self.assertEqual(token.pos, 3)

    def test_trailing_backslash(self):
        """Test that a trailing backslash is flagged and reported"""
        lexemes, tokens, warnings = self.assertParsed('\\ab\\', 3, 3, 1)

        self.assertEqual(lexemes[2].label, '\\')
        self.assertEqual(lexemes[2].type, 'escapedChar')
        self.assertEqual(lexemes[2].pos, 3)
        self.assertTrue(lexemes[2].invalid)
        self.assertTrue(tokens[2].invalid)
        self.assertEqual(warnings['\\E'].positions, [3])
        self.assertEqual(warnings['\\E'].label, '\\')

    def test_bracket_expression(self):
        """Test a simple bracket expression"""
        lexemes, tokens, _ = self.assertParsed('[a]', 3, 1, 0)

        self.assertEqual([lexeme.type for lexeme in lexemes], ['[', 'bracketChar', ']'])
        token = tokens[0]
        self.assertEqual(token.label, '[a]')
        self.assertEqual(token.type, 'bracketClass')
        self.assertEqual(token.pos, 0)
        self.assertTrue(token.match('a'))
        self.assertFalse(token.match('x'))

        self.assertEqual(lexemes[0].begin, 0)
        self.assertEqual(lexemes[0].end, 2)
        self.assertFalse(lexemes[0].negate)
        self.assertEqual(lexemes[0].matches, 'a')
        self.assertEqual(lexemes[2].begin, 0)
        self.assertEqual(lexemes[2].end, 2)

    def test_bracket_expression_after_escape(self):
        """Test positions and indexes of a bracket expression after an escape"""
        lexemes, tokens, _ = self.assertParsed('\\a[b]c', 5, 3, 0)

        token = token_at(tokens, 1)
        self.assertEqual(token.label, '[b]')
        self.assertEqual(token.pos, 2)
        self.assertTrue(token.match('b'))
        self.assertFalse(token.match('a'))

        self.assertEqual(lexemes[1].begin, 1)
        self.assertEqual(lexemes[1].end, 3)
        self.assertEqual(token_at(tokens, 4).label, 'c')
        self.assertEqual(lexemes[4].pos, 5)

    def test_bracket_range(self):
        """Test a character range inside brackets"""
        lexemes, tokens, _ = self.assertParsed('\\a[b-d]e', 7, 3, 0)

        self.assertEqual(lexemes[2].type, 'bracketRangeLow')
        self.assertEqual(lexemes[3].type, '-')
        self.assertEqual(lexemes[4].type, 'bracketRangeHigh')
        self.assertEqual(lexemes[4].pos, 5)

        token = token_at(tokens, 1)
        for ch in 'bcd':
            self.assertTrue(token.match(ch))
        for ch in 'aex':
            self.assertFalse(token.match(ch))
        self.assertEqual(lexemes[1].matches, 'bcd')

    def test_negated_bracket(self):
        """Test a negated bracket expression"""
        lexemes, tokens, _ = self.assertParsed('\\a[^b]c', 6, 3, 0)

        self.assertEqual(lexemes[2].type, '^')
        self.assertEqual(lexemes[3].type, 'bracketChar')
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '[^b]')
        self.assertTrue(token.match('a'))
        self.assertFalse(token.match('b'))
        self.assertTrue(lexemes[1].negate)
        self.assertEqual(lexemes[1].end, 4)

    def test_bracket_special_first_members(self):
        """Test that ']' and '-' are literals at the beginning of a bracket expression"""
        _, tokens, _ = self.assertParsed('\\a[]b]c', 6, 3, 0)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '[]b]')
        self.assertTrue(token.match(']'))
        self.assertTrue(token.match('b'))
        self.assertFalse(token.match('x'))

        _, tokens, _ = self.assertParsed('\\a[^]b]c', 7, 3, 0)
        token = token_at(tokens, 1)
        self.assertTrue(token.match('x'))
        self.assertFalse(token.match(']'))

        lexemes, tokens, _ = self.assertParsed('\\a[-b]c', 6, 3, 0)
        self.assertEqual(lexemes[2].type, 'bracketChar')
        self.assertTrue(token_at(tokens, 1).match('-'))

        lexemes, tokens, _ = self.assertParsed('\\a[-]c', 5, 3, 0)
        self.assertEqual(token_at(tokens, 1).label, '[-]')
        self.assertEqual(lexemes[1].end, 3)

    def test_bracket_trailing_dash(self):
        """Test that a dash before the closing bracket is a literal"""
        lexemes, tokens, _ = self.assertParsed('\\a[b-]c', 6, 3, 0)
        self.assertEqual(lexemes[3].type, 'bracketChar')
        token = token_at(tokens, 1)
        self.assertTrue(token.match('-'))
        self.assertTrue(token.match('b'))
        self.assertFalse(token.match('x'))

        _, tokens, _ = self.assertParsed('\\a[^b-]c', 7, 3, 0)
        token = token_at(tokens, 1)
        self.assertTrue(token.match('x'))
        self.assertFalse(token.match('-'))

    def test_unclosed_bracket(self):
        """Test that an unclosed bracket is finalized with the members read so far"""
        lexemes, tokens, warnings = self.assertParsed('[bc', 3, 1, 1)

        token = tokens[0]
        self.assertEqual(token.label, '[bc]')
        self.assertFalse(token.invalid)
        self.assertTrue(token.match('b'))
        self.assertTrue(token.match('c'))
        self.assertFalse(token.match('a'))
        self.assertEqual(warnings['['].positions, [0])
        self.assertTrue(lexemes[0].invalid)
        self.assertEqual(lexemes[0].end, 2)

    def test_unclosed_bracket_edge_cases(self):
        """Test unclosed brackets ending in special members"""
        lexemes, tokens, warnings = self.assertParsed('[]', 2, 1, 1)
        self.assertEqual(tokens[0].label, '[]]')
        self.assertTrue(tokens[0].match(']'))
        self.assertEqual(lexemes[0].end, 1)

        lexemes, tokens, _ = self.assertParsed('[^]', 3, 1, 1)
        self.assertEqual(tokens[0].label, '[^]]')
        self.assertFalse(tokens[0].match(']'))
        self.assertTrue(lexemes[0].negate)

        lexemes, tokens, warnings = self.assertParsed('\\a[b-', 4, 2, 1)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '[b-]')
        self.assertTrue(token.match('-'))
        self.assertEqual(warnings['['].positions, [2])

        lexemes, tokens, _ = self.assertParsed('\\a[b-d', 5, 2, 1)
        token = token_at(tokens, 1)
        self.assertEqual(token.label, '[b-d]')
        self.assertTrue(token.match('c'))
        self.assertEqual(lexemes[1].end, 4)

    def test_lossless_lexemes(self):
        """Test that joining lexeme labels always gives back the input"""
        for regex in ['', 'a(b|c))', '[a-z', '\\', 'a\\', '((*|?', '[^]-]x\\d+', ')))(((']:
            lexemes, _, _ = parse(regex)
            self.assertEqual(label_string(lexemes), regex)
            self.assertEqual([lexeme.index for lexeme in lexemes], list(range(len(lexemes))))
