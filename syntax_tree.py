"""
Schwift Abstract Syntax Tree
Immutable expression and statement nodes produced by the parser
Every node renders back to source syntax for error messages
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from values import Value, repr_value


# ============================================================================
# OPERATORS
# ============================================================================

class Operator(Enum):
  """Binary operators, each carrying its source symbol"""
  ADD = "+"
  SUBTRACT = "-"
  MULTIPLY = "*"
  DIVIDE = "/"
  MODULO = "%"
  EQUALITY = "=="
  INEQUALITY = "!="
  LESS_THAN = "<"
  GREATER_THAN = ">"
  LESS_EQUAL = "<="
  GREATER_EQUAL = ">="
  AND = "and"
  OR = "or"

  @property
  def symbol(self) -> str:
    return self.value

  @classmethod
  def from_symbol(cls, symbol: str) -> "Operator":
    return cls(symbol)

  def __str__(self) -> str:
    return self.symbol


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Literal:
  value: Value

  def __str__(self) -> str:
    return repr_value(self.value)


@dataclass(frozen=True)
class Variable:
  name: str

  def __str__(self) -> str:
    return self.name


@dataclass(frozen=True)
class ListIndex:
  name: str
  index: "Expression"

  def __str__(self) -> str:
    return f"{self.name}[{self.index}]"


@dataclass(frozen=True)
class ListLength:
  name: str

  def __str__(self) -> str:
    return f"{self.name} squanch"


@dataclass(frozen=True)
class Not:
  operand: "Expression"

  def __str__(self) -> str:
    return f"!{self.operand}"


@dataclass(frozen=True)
class BinaryOperator:
  left: "Expression"
  operator: Operator
  right: "Expression"

  def __str__(self) -> str:
    return f"{_operand_str(self.left)} {self.operator} {_operand_str(self.right)}"


def _operand_str(expression: "Expression") -> str:
  # Parenthesize nested operations so the rendering reparses to the same tree
  if isinstance(expression, (BinaryOperator, Not)):
    return f"({expression})"
  return str(expression)


Expression = Union[Literal, Variable, ListIndex, ListLength, Not, BinaryOperator]


# ============================================================================
# STATEMENTS
# ============================================================================

def _render_block(body: Tuple["Statement", ...]) -> str:
  if not body:
    return ":<\n>:"
  inner = "\n".join("    " + line for stmt in body for line in str(stmt).split("\n"))
  return f":<\n{inner}\n>:"


@dataclass(frozen=True)
class Assignment:
  name: str
  expression: Expression

  def __str__(self) -> str:
    return f"{self.name} squanch {self.expression}"


@dataclass(frozen=True)
class Print:
  expression: Expression

  def __str__(self) -> str:
    return f"show me what you got {self.expression}"


@dataclass(frozen=True)
class Input:
  name: str

  def __str__(self) -> str:
    return f"portal gun {self.name}"


@dataclass(frozen=True)
class Delete:
  name: str

  def __str__(self) -> str:
    return f"shoot {self.name}"


@dataclass(frozen=True)
class ListNew:
  name: str

  def __str__(self) -> str:
    return f"{self.name} on a cob"


@dataclass(frozen=True)
class ListAppend:
  name: str
  expression: Expression

  def __str__(self) -> str:
    return f"{self.name} assimilate {self.expression}"


@dataclass(frozen=True)
class ListAssign:
  name: str
  index: Expression
  expression: Expression

  def __str__(self) -> str:
    return f"{self.name}[{self.index}] squanch {self.expression}"


@dataclass(frozen=True)
class ListDelete:
  name: str
  index: Expression

  def __str__(self) -> str:
    return f"squanch {self.name}[{self.index}]"


@dataclass(frozen=True)
class If:
  condition: Expression
  body: Tuple["Statement", ...]
  else_body: Optional[Tuple["Statement", ...]] = None

  def __str__(self) -> str:
    result = f"if {self.condition} {_render_block(self.body)}"
    if self.else_body is not None:
      result += f" else {_render_block(self.else_body)}"
    return result


@dataclass(frozen=True)
class While:
  condition: Expression
  body: Tuple["Statement", ...]

  def __str__(self) -> str:
    return f"while {self.condition} {_render_block(self.body)}"


@dataclass(frozen=True)
class Catch:
  try_body: Tuple["Statement", ...]
  catch_body: Tuple["Statement", ...]

  def __str__(self) -> str:
    return f"schwifty {_render_block(self.try_body)} getschwifty {_render_block(self.catch_body)}"


Statement = Union[
    Assignment, Print, Input, Delete, ListNew, ListAppend, ListAssign,
    ListDelete, If, While, Catch
]


def summarize(statement: Statement) -> str:
  """One-line rendering of a statement; block bodies are elided"""
  if isinstance(statement, If):
    return f"if {statement.condition} :< ... >:"
  if isinstance(statement, While):
    return f"while {statement.condition} :< ... >:"
  if isinstance(statement, Catch):
    return "schwifty :< ... >: getschwifty :< ... >:"
  return str(statement)


# ============================================================================
# PRETTY PRINTING
# ============================================================================

def pretty_print_ast(node, indent: int = 0) -> str:
  """Pretty print an AST node as an indented tree for debugging"""
  pad = "  " * indent
  if isinstance(node, Literal):
    return f"{pad}Literal({node.value.type} {repr_value(node.value)})\n"
  if isinstance(node, Variable):
    return f"{pad}Variable({node.name})\n"
  if isinstance(node, ListLength):
    return f"{pad}ListLength({node.name})\n"
  if isinstance(node, ListIndex):
    return f"{pad}ListIndex({node.name})\n" + pretty_print_ast(node.index, indent + 1)
  if isinstance(node, Not):
    return f"{pad}Not\n" + pretty_print_ast(node.operand, indent + 1)
  if isinstance(node, BinaryOperator):
    return (f"{pad}BinaryOperator({node.operator.name})\n"
            + pretty_print_ast(node.left, indent + 1)
            + pretty_print_ast(node.right, indent + 1))

  if isinstance(node, (Assignment, ListAppend)):
    return f"{pad}{type(node).__name__}({node.name})\n" + pretty_print_ast(node.expression, indent + 1)
  if isinstance(node, Print):
    return f"{pad}Print\n" + pretty_print_ast(node.expression, indent + 1)
  if isinstance(node, (Input, Delete, ListNew)):
    return f"{pad}{type(node).__name__}({node.name})\n"
  if isinstance(node, ListAssign):
    return (f"{pad}ListAssign({node.name})\n"
            + pretty_print_ast(node.index, indent + 1)
            + pretty_print_ast(node.expression, indent + 1))
  if isinstance(node, ListDelete):
    return f"{pad}ListDelete({node.name})\n" + pretty_print_ast(node.index, indent + 1)
  if isinstance(node, If):
    result = f"{pad}If\n" + pretty_print_ast(node.condition, indent + 1)
    result += f"{pad}  then:\n" + _pretty_body(node.body, indent + 2)
    if node.else_body is not None:
      result += f"{pad}  else:\n" + _pretty_body(node.else_body, indent + 2)
    return result
  if isinstance(node, While):
    return (f"{pad}While\n" + pretty_print_ast(node.condition, indent + 1)
            + f"{pad}  do:\n" + _pretty_body(node.body, indent + 2))
  if isinstance(node, Catch):
    return (f"{pad}Catch\n"
            + f"{pad}  try:\n" + _pretty_body(node.try_body, indent + 2)
            + f"{pad}  catch:\n" + _pretty_body(node.catch_body, indent + 2))
  return f"{pad}{node!r}\n"


def _pretty_body(body, indent: int) -> str:
  return "".join(pretty_print_ast(stmt, indent) for stmt in body)
