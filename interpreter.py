"""
Schwift Interpreter
Tree-walking evaluator that owns the symbol table of one program run
Side effects (printing, reading input) go through injected streams
"""

from typing import Dict, Iterable, Optional, TextIO
import sys

from error_handling import (
  SchwiftError,
  SchwiftRuntimeError,
  UnknownVariable,
  IndexOutOfBounds,
  IndexUnindexable,
  InputError,
)
from parsing import create_parser
from syntax_tree import (
  Literal,
  Variable,
  ListIndex,
  ListLength,
  Not,
  BinaryOperator,
  Assignment,
  Print,
  Input,
  Delete,
  ListNew,
  ListAppend,
  ListAssign,
  ListDelete,
  If,
  While,
  Catch,
  Expression,
  Statement,
  summarize,
)
from utilities import (
  apply_binary_operator,
  expect_bool,
  expect_indexable,
  expect_int,
  expect_list,
  in_bounds,
)
from values import (
  Value,
  LIST,
  STRING,
  copy_value,
  make_bool,
  make_int,
  make_list,
  make_string,
  show_value,
)


class State:
  """Interpreter state: the flat symbol table plus the I/O collaborators"""

  def __init__(self, input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None,
               debug: bool = False):
    self.symbols: Dict[str, Value] = {}
    self.input_stream = input_stream if input_stream is not None else sys.stdin
    self.output_stream = output_stream if output_stream is not None else sys.stdout
    self.debug = debug

  def _trace(self, message: str) -> None:
    if self.debug:
      print(f"DEBUG: {message}", file=sys.stderr)

  # ==========================================================================
  # SYMBOL TABLE
  # ==========================================================================

  def get(self, name: str) -> Value:
    """Copy of the value bound to name"""
    return copy_value(self._lookup(name))

  def _lookup(self, name: str) -> Value:
    try:
      return self.symbols[name]
    except KeyError:
      raise UnknownVariable(name) from None

  def _lookup_list(self, name: str) -> list:
    return expect_list(self._lookup(name))

  # ==========================================================================
  # EXPRESSIONS
  # ==========================================================================

  def evaluate(self, expression: Expression) -> Value:
    """Evaluate an expression to a value; raises a SchwiftRuntimeError kind on failure"""
    if isinstance(expression, Literal):
      return copy_value(expression.value)
    elif isinstance(expression, Variable):
      return self.get(expression.name)
    elif isinstance(expression, ListIndex):
      return self.list_index(expression.name, expression.index)
    elif isinstance(expression, ListLength):
      return self.list_length(expression.name)
    elif isinstance(expression, Not):
      return make_bool(not expect_bool(self.evaluate(expression.operand)))
    elif isinstance(expression, BinaryOperator):
      left = self.evaluate(expression.left)
      right = self.evaluate(expression.right)
      return apply_binary_operator(expression.operator, left, right)
    raise TypeError(f"Unknown expression node: {expression!r}")

  def list_index(self, name: str, index_expression: Expression) -> Value:
    """Element of a list, or one-character string of a string, at an index"""
    index = self._evaluate_index(index_expression)
    container = self._lookup(name)

    if container.type == LIST:
      if not in_bounds(index, len(container.value)):
        raise IndexOutOfBounds(copy_value(container), index)
      return copy_value(container.value[index])
    elif container.type == STRING:
      if not in_bounds(index, len(container.value)):
        raise IndexOutOfBounds(container, index)
      return make_string(container.value[index])
    raise IndexUnindexable(container)

  def list_length(self, name: str) -> Value:
    return make_int(len(expect_indexable(self._lookup(name))))

  def _evaluate_index(self, index_expression: Expression) -> int:
    return expect_int(self.evaluate(index_expression))

  def _evaluate_condition(self, condition: Expression) -> bool:
    return expect_bool(self.evaluate(condition))

  # ==========================================================================
  # STATEMENTS
  # ==========================================================================

  def assign(self, name: str, expression: Expression) -> None:
    self.symbols[name] = self.evaluate(expression)

  def delete(self, name: str) -> None:
    try:
      del self.symbols[name]
    except KeyError:
      raise UnknownVariable(name) from None

  def print(self, expression: Expression) -> None:
    value = self.evaluate(expression)
    self.output_stream.write(show_value(value) + "\n")
    self.output_stream.flush()

  def input(self, name: str) -> None:
    try:
      line = self.input_stream.readline()
    except (OSError, UnicodeDecodeError) as e:
      raise InputError(e) from e
    self.symbols[name] = make_string(line.strip())

  def list_new(self, name: str) -> None:
    self.symbols[name] = make_list()

  def list_append(self, name: str, expression: Expression) -> None:
    to_append = self.evaluate(expression)
    self._lookup_list(name).append(to_append)

  def list_assign(self, name: str, index_expression: Expression, expression: Expression) -> None:
    index = self._evaluate_index(index_expression)
    to_assign = self.evaluate(expression)
    container = self._lookup(name)
    elements = expect_list(container)

    if not in_bounds(index, len(elements)):
      raise IndexOutOfBounds(copy_value(container), index)
    elements[index] = to_assign

  def list_delete(self, name: str, index_expression: Expression) -> None:
    index = self._evaluate_index(index_expression)
    container = self._lookup(name)
    elements = expect_list(container)

    if not in_bounds(index, len(elements)):
      raise IndexOutOfBounds(copy_value(container), index)
    del elements[index]

  def exec_if(self, statement: If) -> None:
    try:
      condition = self._evaluate_condition(statement.condition)
    except SchwiftRuntimeError as e:
      raise SchwiftError(e, statement) from e

    if condition:
      self.run(statement.body)
    elif statement.else_body is not None:
      self.run(statement.else_body)

  def exec_while(self, statement: While) -> None:
    while True:
      try:
        condition = self._evaluate_condition(statement.condition)
      except SchwiftRuntimeError as e:
        raise SchwiftError(e, statement) from e
      if not condition:
        break
      self.run(statement.body)

  def catch(self, statement: Catch) -> None:
    try:
      self.run(statement.try_body)
    except SchwiftError:
      # The failed branch leaves no trace; partial effects are kept
      self._trace("recovered from error in schwifty block")
      self.run(statement.catch_body)

  def execute(self, statement: Statement) -> None:
    """Execute one statement; failures are raised as SchwiftError wrapping the statement"""
    self._trace(f"executing {summarize(statement)}")

    if isinstance(statement, If):
      self.exec_if(statement)
      return
    elif isinstance(statement, While):
      self.exec_while(statement)
      return
    elif isinstance(statement, Catch):
      self.catch(statement)
      return

    try:
      if isinstance(statement, Assignment):
        self.assign(statement.name, statement.expression)
      elif isinstance(statement, Print):
        self.print(statement.expression)
      elif isinstance(statement, Input):
        self.input(statement.name)
      elif isinstance(statement, Delete):
        self.delete(statement.name)
      elif isinstance(statement, ListNew):
        self.list_new(statement.name)
      elif isinstance(statement, ListAppend):
        self.list_append(statement.name, statement.expression)
      elif isinstance(statement, ListAssign):
        self.list_assign(statement.name, statement.index, statement.expression)
      elif isinstance(statement, ListDelete):
        self.list_delete(statement.name, statement.index)
      else:
        raise TypeError(f"Unknown statement node: {statement!r}")
    except SchwiftRuntimeError as e:
      raise SchwiftError(e, statement) from e

  def run(self, statements: Iterable[Statement]) -> None:
    """Execute statements in order, stopping at the first unrecovered error"""
    for statement in statements:
      self.execute(statement)


# ============================================================================
# FACTORY FUNCTIONS (for compatibility with main.py)
# ============================================================================

def create_interpreter(debug: bool = False, input_stream: Optional[TextIO] = None,
                       output_stream: Optional[TextIO] = None) -> State:
  """Factory function returning an interpreter with an empty symbol table"""
  return State(input_stream=input_stream, output_stream=output_stream, debug=debug)


def create_debug_interpreter() -> State:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)


def run_program(source: str, input_stream: Optional[TextIO] = None,
                output_stream: Optional[TextIO] = None, debug: bool = False,
                filename: str = "<input>") -> State:
  """Parse and run a complete program, returning the final state"""
  statements = create_parser(debug=debug).parse_string(source, filename)
  state = create_interpreter(debug=debug, input_stream=input_stream, output_stream=output_stream)
  state.run(statements)
  return state
