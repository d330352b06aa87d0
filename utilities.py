"""
Utilities module for the Schwift interpreter
Type-check helpers and binary operation factories shared by the evaluator
"""

from typing import Any, Callable, Dict, Tuple
import operator

from error_handling import DivideByZero, IndexUnindexable, UnexpectedType
from syntax_tree import Operator
from values import (
  Value,
  make_bool,
  make_int,
  is_bool,
  is_indexable,
  is_int,
  is_list,
  is_string,
)


BinaryOp = Callable[[Value, Value], Value]


# ==================== TYPE CHECKING UTILITIES ====================

def expect_int(value: Value) -> int:
  """
  Unwrap an Int value

  Raises:
    UnexpectedType if value is not an Int
  """
  if not is_int(value):
    raise UnexpectedType("int", value)
  return value.value


def expect_bool(value: Value) -> bool:
  """
  Unwrap a Bool value

  Raises:
    UnexpectedType if value is not a Bool
  """
  if not is_bool(value):
    raise UnexpectedType("bool", value)
  return value.value


def expect_list(value: Value) -> list:
  """
  Unwrap a List value for in-place mutation

  Raises:
    IndexUnindexable if value is not a List
  """
  if not is_list(value):
    raise IndexUnindexable(value)
  return value.value


def expect_indexable(value: Value) -> Any:
  """Unwrap a List or String payload"""
  if not is_indexable(value):
    raise IndexUnindexable(value)
  return value.value


def in_bounds(index: int, length: int) -> bool:
  return 0 <= index < length


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(op: Callable[[int, int], int]) -> BinaryOp:
  """
  Factory for integer arithmetic operations

  Examples:
    add = binary_arithmetic_op(operator.add)
    add(make_int(1), make_int(2)) -> Int(3)
  """
  def arithmetic(x: Value, y: Value) -> Value:
    return make_int(op(expect_int(x), expect_int(y)))

  return arithmetic


def binary_division_op(op: Callable[[int, int], int]) -> BinaryOp:
  """Factory for arithmetic operations that reject a zero divisor"""
  def division(x: Value, y: Value) -> Value:
    dividend, divisor = expect_int(x), expect_int(y)
    if divisor == 0:
      raise DivideByZero(x)
    return make_int(op(dividend, divisor))

  return division


def binary_comparison_op(op: Callable[[Any, Any], bool]) -> BinaryOp:
  """
  Factory for ordering comparisons

  Both operands must be Ints, or both Strings (compared lexicographically).
  """
  def comparison(x: Value, y: Value) -> Value:
    if is_string(x) and is_string(y):
      return make_bool(op(x.value, y.value))
    return make_bool(op(expect_int(x), expect_int(y)))

  return comparison


def binary_equality_op(equal: bool) -> BinaryOp:
  """Structural (in)equality, defined for any pair of values"""
  def equality(x: Value, y: Value) -> Value:
    return make_bool((x == y) == equal)

  return equality


def binary_logic_op(op: Callable[[bool, bool], bool]) -> BinaryOp:
  """Factory for strict boolean connectives; both operands must be Bools"""
  def logic(x: Value, y: Value) -> Value:
    return make_bool(op(expect_bool(x), expect_bool(y)))

  return logic


BINARY_OPERATIONS: Dict[Operator, BinaryOp] = {
  Operator.ADD: binary_arithmetic_op(operator.add),
  Operator.SUBTRACT: binary_arithmetic_op(operator.sub),
  Operator.MULTIPLY: binary_arithmetic_op(operator.mul),
  Operator.DIVIDE: binary_division_op(operator.floordiv),
  Operator.MODULO: binary_division_op(operator.mod),
  Operator.EQUALITY: binary_equality_op(True),
  Operator.INEQUALITY: binary_equality_op(False),
  Operator.LESS_THAN: binary_comparison_op(operator.lt),
  Operator.GREATER_THAN: binary_comparison_op(operator.gt),
  Operator.LESS_EQUAL: binary_comparison_op(operator.le),
  Operator.GREATER_EQUAL: binary_comparison_op(operator.ge),
  Operator.AND: binary_logic_op(lambda a, b: a and b),
  Operator.OR: binary_logic_op(lambda a, b: a or b),
}


def apply_binary_operator(op: Operator, left: Value, right: Value) -> Value:
  """Apply a binary operator to two evaluated operands"""
  return BINARY_OPERATIONS[op](left, right)


def split_symbols(symbols: Dict[str, Value]) -> Tuple[Dict[str, Value], Dict[str, Value]]:
  """Partition a symbol table into (lists, scalars), for display"""
  lists = {name: val for name, val in symbols.items() if is_list(val)}
  scalars = {name: val for name, val in symbols.items() if not is_list(val)}
  return lists, scalars
