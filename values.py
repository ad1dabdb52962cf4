"""
Lox runtime values
Values are plain Python objects: None (nil), bool, float and str
"""

import math
from decimal import Decimal
from typing import Any


NIL = "nil"
BOOLEAN = "boolean"
NUMBER = "number"
STRING = "string"


def value_kind(value: Any) -> str:
  """Name the kind of a runtime value"""
  if value is None:
    return NIL
  # bool first: it is an int subclass in Python
  if isinstance(value, bool):
    return BOOLEAN
  if isinstance(value, float):
    return NUMBER
  if isinstance(value, str):
    return STRING
  raise TypeError(f"Not a Lox value: {value!r}")


def is_number(value: Any) -> bool:
  return isinstance(value, float) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
  return isinstance(value, str)


# ============================================================================
# TRUTHINESS AND EQUALITY
# ============================================================================

def is_truthy(value: Any) -> bool:
  """nil and false are falsey, everything else (0 and "" included) is truthy"""
  if value is None:
    return False
  if isinstance(value, bool):
    return value
  return True


def is_equal(a: Any, b: Any) -> bool:
  """Same kind and same content; never coerces across kinds"""
  if a is None and b is None:
    return True
  if a is None or b is None:
    return False
  if value_kind(a) != value_kind(b):
    return False
  return a == b


# ============================================================================
# PRINTING
# ============================================================================

def stringify(value: Any) -> str:
  """Convert a value to the text print shows"""
  if value is None:
    return "nil"
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, float):
    if not math.isfinite(value):
      return repr(value)
    # Positional digits of the shortest round-tripping form, never exponent notation
    text = format(Decimal(repr(value)), 'f')
    if text.endswith(".0"):
      text = text[:-2]
    return text
  return str(value)
