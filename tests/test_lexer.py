"""
Tests for the prattcalc lexer and its token cursor.

Author: xwest
"""

import unittest

from prattcalc.lexer import Lexer, TokenStream, TokenType, tokenize_string


def kinds_and_text(source):
    return [(token.type, token.lexeme) for token in tokenize_string(source)]


class TestTokenization(unittest.TestCase):
    """Rules for turning characters into tokens."""

    def test_empty_input_is_just_eof(self):
        tokens = tokenize_string("")
        self.assertEqual(len(tokens), 1)
        self.assertTrue(tokens[0].is_eof)

    def test_whitespace_only_is_just_eof(self):
        self.assertEqual(kinds_and_text(" \t\n  "), [(TokenType.EOF, "")])

    def test_digit_run_is_one_atom(self):
        self.assertEqual(kinds_and_text("1234567890"), [
            (TokenType.ATOM, "1234567890"),
            (TokenType.EOF, ""),
        ])

    def test_letters_are_single_character_atoms(self):
        self.assertEqual(kinds_and_text("ab"), [
            (TokenType.ATOM, "a"),
            (TokenType.ATOM, "b"),
            (TokenType.EOF, ""),
        ])

    def test_letter_then_digits(self):
        self.assertEqual(kinds_and_text("x12"), [
            (TokenType.ATOM, "x"),
            (TokenType.ATOM, "12"),
            (TokenType.EOF, ""),
        ])

    def test_operators_are_single_characters(self):
        self.assertEqual(kinds_and_text("3+-4"), [
            (TokenType.ATOM, "3"),
            (TokenType.OPERATOR, "+"),
            (TokenType.OPERATOR, "-"),
            (TokenType.ATOM, "4"),
            (TokenType.EOF, ""),
        ])

    def test_multi_character_operators_are_split(self):
        lexemes = [token.lexeme for token in tokenize_string("a==b")]
        self.assertEqual(lexemes, ["a", "=", "=", "b", ""])

    def test_unknown_characters_become_operators(self):
        tokens = tokenize_string("@ # $ ~")
        self.assertEqual([t.type for t in tokens[:-1]], [TokenType.OPERATOR] * 4)
        self.assertEqual([t.lexeme for t in tokens[:-1]], ["@", "#", "$", "~"])

    def test_whitespace_is_skipped(self):
        self.assertEqual(
            [t.lexeme for t in tokenize_string("  3   + 4   ")],
            ["3", "+", "4", ""]
        )

    def test_exactly_one_eof_at_the_end(self):
        tokens = tokenize_string("(1 + 2) * 3!")
        eofs = [t for t in tokens if t.is_eof]
        self.assertEqual(len(eofs), 1)
        self.assertIs(tokens[-1], eofs[0])

    def test_superscript_digit_is_not_a_number(self):
        tokens = tokenize_string("2²")
        self.assertEqual(tokens[0].lexeme, "2")
        self.assertEqual(tokens[1].lexeme, "²")

    def test_tokenize_is_repeatable(self):
        lexer = Lexer("1 + 2")
        first = lexer.tokenize()
        second = lexer.tokenize()
        self.assertEqual(first, second)


class TestSourceLocations(unittest.TestCase):
    """Locations are only used for diagnostics but must be right."""

    def test_columns(self):
        tokens = tokenize_string("12 + x")
        self.assertEqual([t.location.column for t in tokens], [1, 4, 6, 7])
        self.assertEqual([t.location.offset for t in tokens], [0, 3, 5, 6])

    def test_lines(self):
        tokens = tokenize_string("1 +\n  2")
        self.assertEqual(tokens[2].location.line, 2)
        self.assertEqual(tokens[2].location.column, 3)

    def test_filename(self):
        tokens = Lexer("1", filename="calc.txt").tokenize()
        self.assertEqual(str(tokens[0].location), "calc.txt:1:1")


class TestTokenStream(unittest.TestCase):
    """peek/next semantics of the cursor."""

    def setUp(self):
        self.stream = Lexer("1 + 2").stream()

    def test_peek_does_not_consume(self):
        self.assertEqual(self.stream.peek().lexeme, "1")
        self.assertEqual(self.stream.peek().lexeme, "1")
        self.assertEqual(self.stream.position, 0)

    def test_next_consumes_in_order(self):
        self.assertEqual([self.stream.next().lexeme for _ in range(3)], ["1", "+", "2"])
        self.assertTrue(self.stream.at_end)

    def test_exhausted_stream_keeps_returning_eof(self):
        for _ in range(3):
            self.stream.next()
        for _ in range(5):
            self.assertTrue(self.stream.next().is_eof)
            self.assertTrue(self.stream.peek().is_eof)

    def test_remaining(self):
        self.stream.next()
        self.assertEqual([t.lexeme for t in self.stream.remaining()], ["+", "2", ""])

    def test_rejects_sequence_without_eof(self):
        tokens = tokenize_string("1")[:-1]
        with self.assertRaises(ValueError):
            TokenStream(tokens)


class TestTokenHelpers(unittest.TestCase):

    def test_symbol_only_for_operators(self):
        atom, op, eof = tokenize_string("1+")
        self.assertEqual(atom.symbol, "")
        self.assertEqual(op.symbol, "+")
        self.assertEqual(eof.symbol, "")

    def test_describe(self):
        atom, op, eof = tokenize_string("1+")
        self.assertEqual(atom.describe(), "atom '1'")
        self.assertEqual(op.describe(), "operator '+'")
        self.assertEqual(eof.describe(), "end of input")


if __name__ == "__main__":
    unittest.main()
