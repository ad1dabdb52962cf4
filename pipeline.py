"""
Lox pipeline - scanning, parsing and interpretation of one input at a time
"""

from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from error_handling import Diagnostic, LoxErrorHandler, create_error_handler
from interpreter import Interpreter, create_interpreter
from parsing import Parser
from scanning import scan
from syntax import Stmt


# sysexits.h codes
EXIT_OK = 0
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


@dataclass
class RunResult:
  """What one run produced"""
  statements: List[Stmt] = field(default_factory=list)
  diagnostics: List[Diagnostic] = field(default_factory=list)
  interpreted: bool = False


class LoxSession:
  """State one driver keeps across runs: the diagnostic channel and settings"""

  def __init__(self, error_handler: Optional[LoxErrorHandler] = None,
               interpreter: Optional[Interpreter] = None, debug: bool = False):
    self.error_handler = error_handler if error_handler is not None else create_error_handler()
    self.interpreter = interpreter if interpreter is not None else create_interpreter(self.error_handler)
    self.debug = debug

  @property
  def had_error(self) -> bool:
    return self.error_handler.had_error

  @property
  def had_runtime_error(self) -> bool:
    return self.error_handler.had_runtime_error

  def run(self, source: str) -> RunResult:
    """Scan, parse and, when both succeeded, interpret source"""
    handler = self.error_handler
    handler.set_source(source)
    first_diagnostic = len(handler.diagnostics)

    tokens = scan(source, handler, self.debug)
    statements = Parser(tokens, handler, self.debug).parse()

    result = RunResult(statements=statements)
    if not handler.had_error:
      self.interpreter.interpret(statements)
      result.interpreted = True

    result.diagnostics = handler.diagnostics[first_diagnostic:]
    return result

  def run_line(self, line: str) -> RunResult:
    """Run one interactive line; errors never carry over to the next one"""
    result = self.run(line)
    self.error_handler.reset()
    return result

  def run_source(self, source: str) -> int:
    """Run a whole program once and return the process exit status"""
    self.run(source)
    return self.exit_status()

  def run_file(self, path: str) -> int:
    with open(path, 'r', encoding='utf-8') as f:
      source = f.read()
    self.error_handler.filename = path
    return self.run_source(source)

  def exit_status(self) -> int:
    if self.had_error:
      return EXIT_STATIC_ERROR
    if self.had_runtime_error:
      return EXIT_RUNTIME_ERROR
    return EXIT_OK


def create_session(out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                   allow_mixed_concat: bool = False, show_context: bool = False,
                   debug: bool = False) -> LoxSession:
  """Create a session with its error handler and interpreter wired together"""
  error_handler = create_error_handler(stream=err, show_context=show_context)
  interpreter = create_interpreter(
      error_handler, out=out, allow_mixed_concat=allow_mixed_concat, debug=debug)
  return LoxSession(error_handler, interpreter, debug)


def run(source: str, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
        allow_mixed_concat: bool = False) -> RunResult:
  """Run source text in a fresh session"""
  session = create_session(out=out, err=err, allow_mixed_concat=allow_mixed_concat)
  return session.run(source)
