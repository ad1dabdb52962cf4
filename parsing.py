"""
Lox Parser
Recursive descent over the token list with statement-level error recovery
"""

import sys
from typing import List, Optional

from error_handling import LoxErrorHandler, LoxParseError
from scanning import Token, TokenType, scan
from syntax import (
    Binary, Expr, ExpressionStatement, Grouping, Literal, PrintStatement,
    Stmt, Unary, format_ast,
)


# Tokens that can begin a statement or declaration; recovery stops before them
STATEMENT_KEYWORDS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})

TOO_DEEP_MESSAGE = "Expression nesting too deep."

EQUALITY_OPERATORS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON_OPERATORS = (
    TokenType.GREATER, TokenType.GREATER_EQUAL,
    TokenType.LESS, TokenType.LESS_EQUAL,
)
TERM_OPERATORS = (TokenType.MINUS, TokenType.PLUS)
FACTOR_OPERATORS = (TokenType.SLASH, TokenType.STAR)
UNARY_OPERATORS = (TokenType.BANG, TokenType.MINUS)


class Parser:
    """
    Grammar, lowest precedence first:

        program    -> statement* EOF
        statement  -> "print" expression ";" | expression ";"
        expression -> equality
        equality   -> comparison ( ( "!=" | "==" ) comparison )*
        comparison -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
        term       -> factor ( ( "-" | "+" ) factor )*
        factor     -> unary ( ( "/" | "*" ) unary )*
        unary      -> ( "!" | "-" ) unary | primary
        primary    -> NUMBER | STRING | "true" | "false" | "nil"
                    | "(" expression ")"
    """

    def __init__(self, tokens: List[Token], error_handler: Optional[LoxErrorHandler] = None,
                 debug: bool = False):
        self.tokens = list(tokens)
        self.error_handler = error_handler
        self.debug = debug
        self._current = 0

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> List[Stmt]:
        """Parse every statement, skipping the ones that fail to parse"""
        statements = []
        while not self.is_at_end():
            statement = self._statement_with_recovery()
            if statement is not None:
                statements.append(statement)
        return statements

    def parse_expression(self) -> Optional[Expr]:
        """Parse a single expression that must span the whole input"""
        try:
            expr = self.expression()
            if not self.is_at_end():
                raise self._error(self.peek(), "Expect end of expression.")
            return expr
        except LoxParseError:
            return None
        except RecursionError:
            self._error(self.peek(), TOO_DEEP_MESSAGE)
            return None

    def _statement_with_recovery(self) -> Optional[Stmt]:
        start = self._current
        try:
            statement = self.statement()
            if self.debug:
                print(f"Parsed statement: {format_ast(statement)}", file=sys.stderr)
            return statement
        except LoxParseError:
            self.synchronize(start)
            return None
        except RecursionError:
            self._error(self.peek(), TOO_DEEP_MESSAGE)
            self.synchronize(start)
            return None

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        return self.expression_statement()

    def print_statement(self) -> Stmt:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(value)

    def expression_statement(self) -> Stmt:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expression(self) -> Expr:
        return self.equality()

    def _binary_level(self, operand, operators) -> Expr:
        """One left-associative precedence level"""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        return self._binary_level(self.comparison, EQUALITY_OPERATORS)

    def comparison(self) -> Expr:
        return self._binary_level(self.term, COMPARISON_OPERATORS)

    def term(self) -> Expr:
        return self._binary_level(self.factor, TERM_OPERATORS)

    def factor(self) -> Expr:
        return self._binary_level(self.unary, FACTOR_OPERATORS)

    def unary(self) -> Expr:
        if self.match(*UNARY_OPERATORS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self._error(self.peek(), "Expect expression.")

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self._error(self.peek(), message)

    def check(self, token_type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self._current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self._current]

    def previous(self) -> Token:
        return self.tokens[self._current - 1]

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(self, token: Token, message: str) -> LoxParseError:
        if self.error_handler is not None:
            self.error_handler.parse_error(token, message)
        return LoxParseError(token, message)

    def synchronize(self, start: Optional[int] = None) -> None:
        """Discard tokens up to the next statement boundary"""
        # A statement that failed on its first token must still make progress
        if start is None or self._current == start:
            self.advance()

        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_KEYWORDS:
                return
            self.advance()


class LoxParser:
    """Front end combining the scanner and the parser"""

    def __init__(self, error_handler: Optional[LoxErrorHandler] = None, debug: bool = False):
        self.error_handler = error_handler
        self.debug = debug

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Lox source code"""
        return scan(text, self.error_handler, self.debug)

    def parse_tokens(self, tokens: List[Token]) -> List[Stmt]:
        return Parser(tokens, self.error_handler, self.debug).parse()

    def parse_string(self, text: str) -> List[Stmt]:
        """Parse Lox source code from a string"""
        return self.parse_tokens(self.tokenize(text))

    def parse_expression(self, text: str) -> Optional[Expr]:
        """Parse a single Lox expression"""
        return Parser(self.tokenize(text), self.error_handler, self.debug).parse_expression()


def parse(tokens: List[Token], error_handler: Optional[LoxErrorHandler] = None) -> List[Stmt]:
    """Parse a token list into statements"""
    return Parser(tokens, error_handler).parse()


# Factory functions for creating parsers
def create_parser(error_handler: Optional[LoxErrorHandler] = None, debug: bool = False) -> LoxParser:
    """Create a Lox parser"""
    return LoxParser(error_handler, debug=debug)


def create_debug_parser(error_handler: Optional[LoxErrorHandler] = None) -> LoxParser:
    """Create a Lox parser with debug enabled"""
    return LoxParser(error_handler, debug=True)
