"""
Lox Scanner
Single left-to-right pass turning source text into tokens
"""

import sys
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, List


class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # One or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    EOF = "EOF"


KEYWORDS = MappingProxyType({
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
})

SINGLE_CHAR_TOKENS = MappingProxyType({
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
})

# first char -> (kind when followed by '=', kind otherwise)
ONE_OR_TWO_CHAR_TOKENS = MappingProxyType({
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
})


@dataclass(frozen=True)
class Token:
    """Lox token with source position"""
    type: TokenType
    lexeme: str
    literal: Any
    line: int
    offset: int = 0

    def __str__(self) -> str:
        literal = "null" if self.literal is None else self.literal
        return f"{self.type.value} {self.lexeme} {literal}"


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def is_alpha_numeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    """Lox scanner with one character of lookahead past the cursor"""

    def __init__(self, source: str, error_handler=None, debug: bool = False):
        self.source = source
        self.error_handler = error_handler
        self.debug = debug
        self._tokens: List[Token] = []
        self._start = 0
        self._current = 0
        self._line = 1

    @property
    def line(self) -> int:
        return self._line

    def scan_tokens(self) -> List[Token]:
        """Scan the whole source and return the tokens, EOF last"""
        while not self.is_at_end():
            self._start = self._current
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", None, self._line, len(self.source)))
        return self._tokens

    def _scan_token(self) -> None:
        c = self.advance()

        if c in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[c])
        elif c in ONE_OR_TWO_CHAR_TOKENS:
            two_char, one_char = ONE_OR_TWO_CHAR_TOKENS[c]
            self._add_token(two_char if self.match("=") else one_char)
        elif c == "/":
            if self.match("/"):
                # A comment goes until the end of the line
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self._add_token(TokenType.SLASH)
        elif c in (" ", "\r", "\t"):
            pass
        elif c == "\n":
            self._line += 1
        elif c == '"':
            self._string()
        elif is_digit(c):
            self._number()
        elif is_alpha(c):
            self._identifier()
        else:
            self._error("Unexpected character.")

    def is_at_end(self) -> bool:
        return self._current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self._current]
        self._current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return "\0"
        return self.source[self._current]

    def peek_next(self) -> str:
        if self._current + 1 >= len(self.source):
            return "\0"
        return self.source[self._current + 1]

    def _add_token(self, token_type: TokenType, literal: Any = None) -> None:
        text = self.source[self._start:self._current]
        token = Token(token_type, text, literal, self._line, self._start)
        if self.debug:
            print(f"Scanned token: {token}", file=sys.stderr)
        self._tokens.append(token)

    def _error(self, message: str) -> None:
        if self.error_handler is not None:
            self.error_handler.scan_error(self._line, message, self._start)

    def _string(self) -> None:
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == "\n":
                self._line += 1
            self.advance()

        if self.is_at_end():
            self._error("Unterminated string.")
            return

        # The closing quote
        self.advance()

        value = self.source[self._start + 1:self._current - 1]
        self._add_token(TokenType.STRING, value)

    def _number(self) -> None:
        while is_digit(self.peek()):
            self.advance()

        # The dot belongs to the number only when a digit follows it
        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        text = self.source[self._start:self._current]
        try:
            value = float(text)
        except ValueError:
            self._error(f"Invalid number '{text}'.")
            return
        self._add_token(TokenType.NUMBER, value)

    def _identifier(self) -> None:
        while is_alpha_numeric(self.peek()):
            self.advance()

        text = self.source[self._start:self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, error_handler=None, debug: bool = False) -> List[Token]:
    """Scan source text into a token list"""
    return Scanner(source, error_handler, debug).scan_tokens()
