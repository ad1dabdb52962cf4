"""
Scanner tests for the Lox language
"""

import pytest
from scanning import KEYWORDS, Token, TokenType, scan


def types_of(tokens):
  return [t.type for t in tokens]


class TestBasicTokens:
  """Single tokens and operators"""

  def test_empty_source_yields_only_eof(self):
    tokens = scan("")
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.EOF
    assert tokens[0].lexeme == ""
    assert tokens[0].line == 1

  def test_punctuation(self):
    tokens = scan("(){},.-+;*/")
    assert types_of(tokens) == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
        TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS,
        TokenType.SEMICOLON, TokenType.STAR, TokenType.SLASH, TokenType.EOF,
    ]

  @pytest.mark.parametrize("text,expected", [
      ("!=", TokenType.BANG_EQUAL),
      ("==", TokenType.EQUAL_EQUAL),
      ("<=", TokenType.LESS_EQUAL),
      (">=", TokenType.GREATER_EQUAL),
  ])
  def test_two_character_operators_are_greedy(self, text, expected):
    tokens = scan(text)
    assert types_of(tokens) == [expected, TokenType.EOF]
    assert tokens[0].lexeme == text

  def test_one_character_forms_on_mismatch(self):
    tokens = scan("! = < >")
    assert types_of(tokens) == [
        TokenType.BANG, TokenType.EQUAL, TokenType.LESS, TokenType.GREATER, TokenType.EOF,
    ]

  def test_comment_runs_to_end_of_line(self):
    tokens = scan("1 // ignored + 2\n/ 3")
    assert types_of(tokens) == [
        TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER, TokenType.EOF,
    ]
    assert tokens[1].line == 2


class TestLiterals:
  """Numbers, strings, identifiers and keywords"""

  @pytest.mark.parametrize("text,value", [
      ("0", 0.0),
      ("123", 123.0),
      ("3.25", 3.25),
      ("10.5", 10.5),
  ])
  def test_number_literal(self, text, value):
    tokens = scan(text)
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert tokens[0].literal == value
    assert isinstance(tokens[0].literal, float)

  def test_trailing_dot_is_not_part_of_number(self):
    tokens = scan("1.")
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].lexeme == "1"
    assert tokens[0].literal == 1.0

  def test_leading_dot_is_not_part_of_number(self):
    tokens = scan(".5")
    assert types_of(tokens) == [TokenType.DOT, TokenType.NUMBER, TokenType.EOF]

  def test_string_literal(self):
    tokens = scan('"hello world"')
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].literal == "hello world"
    assert tokens[0].lexeme == '"hello world"'

  def test_multiline_string_counts_lines(self):
    tokens = scan('"a\nb"\n1')
    assert tokens[0].literal == "a\nb"
    assert tokens[0].line == 2
    assert tokens[1].line == 3

  def test_keywords(self):
    for text, token_type in KEYWORDS.items():
      tokens = scan(text)
      assert tokens[0].type == token_type
      assert tokens[0].literal is None

  def test_identifiers(self):
    tokens = scan("orchid _tmp x1 printer")
    assert types_of(tokens)[:-1] == [TokenType.IDENTIFIER] * 4
    assert [t.lexeme for t in tokens[:-1]] == ["orchid", "_tmp", "x1", "printer"]

  def test_keyword_table_is_read_only(self):
    with pytest.raises(TypeError):
      KEYWORDS["let"] = TokenType.VAR


class TestPositions:
  """Line numbers and offsets"""

  def test_lines_increment_on_newline(self):
    tokens = scan("1\n2\r\n\t3")
    assert [t.line for t in tokens] == [1, 2, 3, 3]

  def test_offsets_point_at_lexeme_start(self):
    tokens = scan("ab + 12")
    assert [t.offset for t in tokens] == [0, 3, 5, 7]

  def test_token_str(self):
    assert str(Token(TokenType.NUMBER, "1", 1.0, 1)) == "NUMBER 1 1.0"
    assert str(Token(TokenType.SEMICOLON, ";", None, 1)) == "SEMICOLON ; null"


class TestScanErrors:
  """Diagnostics raised while scanning"""

  def test_unexpected_character_is_reported_and_skipped(self, error_handler, err):
    tokens = scan("1 @ 2", error_handler)
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert error_handler.had_error
    assert err.getvalue() == "[line 1] Error: Unexpected character.\n"

  def test_scanning_continues_after_several_errors(self, error_handler):
    tokens = scan("#\n$ 3", error_handler)
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert [d.line for d in error_handler.diagnostics] == [1, 2]

  def test_unterminated_string(self, error_handler, err):
    tokens = scan('1 "abc\ndef', error_handler)
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert err.getvalue() == "[line 2] Error: Unterminated string.\n"

  def test_no_error_handler_still_scans(self):
    tokens = scan("@1")
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.EOF]
