"""
Lox abstract syntax tree
Closed sets of expression and statement nodes, plus printers for debugging
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from scanning import Token
from values import stringify


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Expr:
    pass


@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class Stmt:
    pass


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expression: Expr


@dataclass(frozen=True)
class PrintStatement(Stmt):
    expression: Expr


Node = Union[Expr, Stmt]


# ============================================================================
# PRINTERS
# ============================================================================

def format_ast(node: Node) -> str:
    """Render a node in parenthesized prefix form, e.g. (+ 1 (* 2 3))"""
    if isinstance(node, Literal):
        return stringify(node.value)
    elif isinstance(node, Grouping):
        return _parenthesize("group", node.expression)
    elif isinstance(node, Unary):
        return _parenthesize(node.operator.lexeme, node.right)
    elif isinstance(node, Binary):
        return _parenthesize(node.operator.lexeme, node.left, node.right)
    elif isinstance(node, PrintStatement):
        return _parenthesize("print", node.expression)
    elif isinstance(node, ExpressionStatement):
        return _parenthesize(";", node.expression)
    raise TypeError(f"Unknown AST node: {type(node).__name__}")


def _parenthesize(name: str, *nodes: Node) -> str:
    parts = [name] + [format_ast(node) for node in nodes]
    return "(" + " ".join(parts) + ")"


def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Pretty print a node as an indented tree"""
    result = "  " * indent + type(node).__name__
    if isinstance(node, Literal):
        result += f"({stringify(node.value)!r})"
    elif isinstance(node, (Unary, Binary)):
        result += f"({node.operator.lexeme!r})"
    result += "\n"

    for child in _children(node):
        result += pretty_print_ast(child, indent + 1)

    return result


def ast_to_dict(node: Node) -> Dict[str, Any]:
    """Convert a node to a plain dictionary"""
    result: Dict[str, Any] = {"type": type(node).__name__}
    if isinstance(node, Literal):
        result["value"] = node.value
    elif isinstance(node, (Unary, Binary)):
        result["operator"] = node.operator.lexeme
        result["line"] = node.operator.line
    result["children"] = [ast_to_dict(child) for child in _children(node)]
    return result


def _children(node: Node):
    if isinstance(node, Binary):
        return [node.left, node.right]
    elif isinstance(node, Unary):
        return [node.right]
    elif isinstance(node, (Grouping, ExpressionStatement, PrintStatement)):
        return [node.expression]
    return []
