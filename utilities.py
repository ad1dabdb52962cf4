"""
Utilities module for the Lox interpreter
Operand checks shared by the operator implementations
"""

from typing import Any

from error_handling import LoxRuntimeError, LoxZeroDivisionError
from values import is_number


# ==================== ERROR MESSAGE BUILDERS ====================

def operand_type_error(operator, message: str) -> LoxRuntimeError:
  """
  Generate an operand type error

  Args:
    operator: Operator token the error is reported at
    message: Human readable description

  Returns:
    LoxRuntimeError located at the operator
  """
  return LoxRuntimeError(operator, message)


# ==================== OPERAND CHECKS ====================

def check_number_operand(operator, operand: Any) -> None:
  """Unary operators that only accept numbers"""
  if is_number(operand):
    return
  raise operand_type_error(operator, "Operand must be a number.")


def check_number_operands(operator, left: Any, right: Any) -> None:
  """Binary operators that only accept numbers"""
  if is_number(left) and is_number(right):
    return
  raise operand_type_error(operator, "Operands must be numbers.")


def check_divisor(operator, divisor: float) -> None:
  """
  Reject a zero divisor

  Args:
    operator: The '/' token
    divisor: Right operand, already known to be a number

  Raises:
    LoxZeroDivisionError when divisor is zero (either sign)
  """
  if divisor == 0:
    raise LoxZeroDivisionError(operator, "Cannot divide by zero.")
