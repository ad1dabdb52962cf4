"""
Lox Interpreter - Tree-walking evaluator
Pure functions over the AST; output and error reporting handled at the boundary
"""

import sys
from typing import Any, Dict, List, Optional, TextIO

from error_handling import LoxErrorHandler, LoxRuntimeError
from scanning import TokenType
from syntax import (
    Binary, Expr, ExpressionStatement, Grouping, Literal, PrintStatement,
    Stmt, Unary,
)
from utilities import (
  check_divisor,
  check_number_operand,
  check_number_operands,
  operand_type_error,
)
from values import is_equal, is_number, is_string, is_truthy, stringify


# ============================================================================
# EXECUTION CONTEXT
# ============================================================================

def make_execution_context(out: Optional[TextIO] = None, allow_mixed_concat: bool = False,
                           debug: bool = False) -> Dict:
  """Create the settings a run evaluates under"""
  return {
      'out': out,
      'allow_mixed_concat': allow_mixed_concat,
      'debug': debug
  }


def _trace(context: Dict, message: str) -> None:
  if context['debug']:
    print(message, file=sys.stderr)


# ============================================================================
# EXPRESSIONS
# ============================================================================

def eval_ast(expr: Expr, context: Optional[Dict] = None) -> Any:
  """Evaluate an expression node to a runtime value"""
  if context is None:
    context = make_execution_context()

  _trace(context, f"Evaluating: {type(expr).__name__}")

  if isinstance(expr, Literal):
    return eval_literal(expr, context)
  elif isinstance(expr, Grouping):
    return eval_grouping(expr, context)
  elif isinstance(expr, Unary):
    return eval_unary(expr, context)
  elif isinstance(expr, Binary):
    return eval_binary(expr, context)
  raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def eval_literal(expr: Literal, context: Dict) -> Any:
  return expr.value


def eval_grouping(expr: Grouping, context: Dict) -> Any:
  return eval_ast(expr.expression, context)


def eval_unary(expr: Unary, context: Dict) -> Any:
  right = eval_ast(expr.right, context)
  operator = expr.operator

  if operator.type == TokenType.BANG:
    return not is_truthy(right)
  elif operator.type == TokenType.MINUS:
    check_number_operand(operator, right)
    return -right
  raise operand_type_error(operator, f"Unknown unary operator '{operator.lexeme}'.")


def eval_binary(expr: Binary, context: Dict) -> Any:
  """Evaluate both operands, left first, then apply the operator"""
  left = eval_ast(expr.left, context)
  right = eval_ast(expr.right, context)
  operator = expr.operator
  op = operator.type

  if op == TokenType.PLUS:
    return eval_plus(operator, left, right, context)
  elif op == TokenType.MINUS:
    check_number_operands(operator, left, right)
    return left - right
  elif op == TokenType.STAR:
    check_number_operands(operator, left, right)
    return left * right
  elif op == TokenType.SLASH:
    check_number_operands(operator, left, right)
    check_divisor(operator, right)
    return left / right

  elif op == TokenType.GREATER:
    check_number_operands(operator, left, right)
    return left > right
  elif op == TokenType.GREATER_EQUAL:
    check_number_operands(operator, left, right)
    return left >= right
  elif op == TokenType.LESS:
    check_number_operands(operator, left, right)
    return left < right
  elif op == TokenType.LESS_EQUAL:
    check_number_operands(operator, left, right)
    return left <= right

  # Equality takes operands of any kind
  elif op == TokenType.EQUAL_EQUAL:
    return is_equal(left, right)
  elif op == TokenType.BANG_EQUAL:
    return not is_equal(left, right)

  raise operand_type_error(operator, f"Unknown binary operator '{operator.lexeme}'.")


def eval_plus(operator, left: Any, right: Any, context: Dict) -> Any:
  """Numeric sum or string concatenation"""
  if is_number(left) and is_number(right):
    return left + right
  if is_string(left) and is_string(right):
    return left + right

  if context['allow_mixed_concat']:
    if (is_string(left) and is_number(right)) or (is_number(left) and is_string(right)):
      return stringify(left) + stringify(right)

  raise operand_type_error(operator, "Operands must be two numbers or two strings.")


# ============================================================================
# STATEMENTS
# ============================================================================

def execute_statement(stmt: Stmt, context: Dict) -> None:
  """Run one statement for its effect"""
  _trace(context, f"Executing: {type(stmt).__name__}")

  if isinstance(stmt, PrintStatement):
    value = eval_ast(stmt.expression, context)
    out = context['out'] if context['out'] is not None else sys.stdout
    print(stringify(value), file=out)
  elif isinstance(stmt, ExpressionStatement):
    eval_ast(stmt.expression, context)
  else:
    raise TypeError(f"Unknown statement node: {type(stmt).__name__}")


def outermost_operator(expr: Expr):
  """First operator token found walking down from expr, or None"""
  while isinstance(expr, Grouping):
    expr = expr.expression
  if isinstance(expr, (Unary, Binary)):
    return expr.operator
  return None


def interpret_program(statements: List[Stmt], context: Dict) -> None:
  """Execute statements in order; a runtime error stops the rest"""
  for stmt in statements:
    try:
      execute_statement(stmt, context)
    except RecursionError:
      raise LoxRuntimeError(
          outermost_operator(stmt.expression), "Expression nesting too deep.") from None


# ============================================================================
# INTERPRETER
# ============================================================================

class Interpreter:
  """Runs parsed programs and reports runtime errors to the error handler"""

  def __init__(self, error_handler: Optional[LoxErrorHandler] = None,
               out: Optional[TextIO] = None, allow_mixed_concat: bool = False,
               debug: bool = False):
    self.error_handler = error_handler
    self.context = make_execution_context(out, allow_mixed_concat, debug)

  def interpret(self, statements: List[Stmt]) -> bool:
    """Run statements; returns False when a runtime error stopped the run"""
    try:
      interpret_program(statements, self.context)
      return True
    except LoxRuntimeError as e:
      if self.error_handler is not None:
        self.error_handler.runtime_error(e)
      return False

  def evaluate(self, expr: Expr) -> Any:
    return eval_ast(expr, self.context)


def create_interpreter(error_handler: Optional[LoxErrorHandler] = None,
                       out: Optional[TextIO] = None, allow_mixed_concat: bool = False,
                       debug: bool = False) -> Interpreter:
  """Factory function returning an interpreter"""
  return Interpreter(error_handler, out, allow_mixed_concat, debug)


def create_debug_interpreter(error_handler: Optional[LoxErrorHandler] = None,
                             out: Optional[TextIO] = None,
                             allow_mixed_concat: bool = False) -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(error_handler, out, allow_mixed_concat, debug=True)
