"""
Diagnostics for the Lox pipeline
Scan, parse and runtime errors all end up here as structured records
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO

from pyparsing import col, line as source_line, lineno

from scanning import TokenType


# ============================================================================
# DATA STRUCTURES
# ============================================================================

class DiagnosticKind(Enum):
    SCAN = "scan"
    PARSE = "parse"
    RUNTIME = "runtime"


@dataclass(frozen=True)
class Diagnostic:
    """A (kind, line, message) record describing one failure"""
    kind: DiagnosticKind
    line: int
    message: str
    where: str = ""
    offset: Optional[int] = None

    def format(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"

    def __str__(self) -> str:
        return self.format()


def where_for_token(token) -> str:
    """Location suffix for a diagnostic raised at a token"""
    if token.type == TokenType.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LoxError(Exception):
    """Base class for errors raised inside the pipeline"""

    def __init__(self, token, message: str):
        self.token = token
        self.message = message
        super().__init__(message)

    @property
    def line(self) -> int:
        return self.token.line if self.token is not None else 0


class LoxParseError(LoxError):
    """Malformed grammar at a specific token"""
    pass


class LoxRuntimeError(LoxError):
    """Operand type mismatch or another evaluation failure"""
    pass


class LoxZeroDivisionError(LoxRuntimeError):
    """Division by a zero divisor"""
    pass


# ============================================================================
# SOURCE CONTEXT
# ============================================================================

def get_context_lines(source_text: str, offset: int, filename: Optional[str] = None) -> str:
    """Render the source line holding offset with a caret under the column"""
    if not source_text:
        return ""
    offset = max(0, min(offset, len(source_text)))
    line_num = lineno(offset, source_text)
    col_num = col(offset, source_text)
    text = source_line(offset, source_text)

    line_prefix = f"{line_num:4d}: "
    excerpt = f"{line_prefix}{text}\n{' ' * len(line_prefix)}{' ' * (col_num - 1)}^"
    if filename:
        return f"  --> {filename}:{line_num}:{col_num}\n{excerpt}"
    return excerpt


# ============================================================================
# ERROR HANDLER
# ============================================================================

class LoxErrorHandler:
    """Diagnostic channel shared by the scanner, parser and interpreter"""

    def __init__(self, source_text: str = "", filename: str = "<input>",
                 stream: Optional[TextIO] = None, show_context: bool = False):
        self.source_text = source_text
        self.filename = filename
        self.stream = stream
        self.show_context = show_context
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False
        self.had_runtime_error = False

    def scan_error(self, line: int, message: str, offset: Optional[int] = None) -> Diagnostic:
        return self._report(Diagnostic(DiagnosticKind.SCAN, line, message, "", offset))

    def parse_error(self, token, message: str) -> Diagnostic:
        return self._report(Diagnostic(
            DiagnosticKind.PARSE, token.line, message,
            where_for_token(token), token.offset
        ))

    def runtime_error(self, error: LoxRuntimeError) -> Diagnostic:
        token = error.token
        where = where_for_token(token) if token is not None else ""
        offset = token.offset if token is not None else None
        return self._report(Diagnostic(
            DiagnosticKind.RUNTIME, error.line, error.message, where, offset
        ))

    def reset(self) -> None:
        """Forget the scan/parse failure flag and the recorded diagnostics (between REPL lines)"""
        self.had_error = False
        self.diagnostics.clear()

    def set_source(self, source_text: str) -> None:
        self.source_text = source_text

    @property
    def static_diagnostics(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind != DiagnosticKind.RUNTIME]

    def _report(self, diagnostic: Diagnostic) -> Diagnostic:
        self.diagnostics.append(diagnostic)
        if diagnostic.kind == DiagnosticKind.RUNTIME:
            self.had_runtime_error = True
        else:
            self.had_error = True

        stream = self.stream if self.stream is not None else sys.stderr
        print(diagnostic.format(), file=stream)
        if self.show_context and diagnostic.offset is not None:
            context = get_context_lines(self.source_text, diagnostic.offset, self.filename)
            if context:
                print(context, file=stream)
        return diagnostic


def create_error_handler(source_text: str = "", filename: str = "<input>",
                         stream: Optional[TextIO] = None,
                         show_context: bool = False) -> LoxErrorHandler:
    """Create a diagnostic channel for one session"""
    return LoxErrorHandler(source_text, filename, stream, show_context)
