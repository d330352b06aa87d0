"""
Schwift Value Model
Tagged runtime values: Int, String, Bool and List
Values compare structurally; no reference identity is observable
"""

from dataclasses import dataclass
from typing import Any, List


INT = "Int"
STRING = "String"
BOOL = "Bool"
LIST = "List"

VALUE_TYPES = (INT, STRING, BOOL, LIST)

# Literal spellings of the two booleans
TRUE_KEYWORD = "rick"
FALSE_KEYWORD = "morty"


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class Value:
  """A runtime value tagged with its type name"""
  type: str
  value: Any

  def __post_init__(self):
    if self.type not in VALUE_TYPES:
      raise ValueError(f"Unknown value type: {self.type}")

  def __str__(self) -> str:
    return show_value(self)

  def __repr__(self) -> str:
    return f"{self.type}({repr_value(self)})"


def make_value(value: Any, type_name: str) -> Value:
  """Create a runtime value"""
  return Value(type_name, value)


def make_int(value: int) -> Value:
  return make_value(int(value), INT)


def make_string(value: str) -> Value:
  return make_value(value, STRING)


def make_bool(value: bool) -> Value:
  return make_value(bool(value), BOOL)


def make_list(elements: List[Value] = None) -> Value:
  return make_value(list(elements) if elements else [], LIST)


# ============================================================================
# PREDICATES AND HELPERS
# ============================================================================

def is_int(value: Value) -> bool:
  return value.type == INT


def is_string(value: Value) -> bool:
  return value.type == STRING


def is_bool(value: Value) -> bool:
  return value.type == BOOL


def is_list(value: Value) -> bool:
  return value.type == LIST


def is_indexable(value: Value) -> bool:
  """Lists and strings support position-based access and length queries"""
  return value.type in (LIST, STRING)


def type_name(value: Value) -> str:
  """Lower-case kind name used in type error messages"""
  return value.type.lower()


def copy_value(value: Value) -> Value:
  """Copy a value so that list payloads are never shared between bindings"""
  if value.type == LIST:
    return Value(LIST, [copy_value(elem) for elem in value.value])
  return value


def value_length(value: Value) -> int:
  """Element count of a list or character count of a string"""
  return len(value.value)


# ============================================================================
# DISPLAY
# ============================================================================

def show_value(value: Value) -> str:
  """Textual form written by the print statement"""
  if value.type == STRING:
    return value.value
  elif value.type == INT:
    return str(value.value)
  elif value.type == BOOL:
    return TRUE_KEYWORD if value.value else FALSE_KEYWORD
  elif value.type == LIST:
    return "[" + ", ".join(repr_value(elem) for elem in value.value) + "]"
  return f"<{value.type}>"


def repr_value(value: Value) -> str:
  """Source-syntax rendering; strings are quoted"""
  if value.type == STRING:
    return f'"{value.value}"'
  return show_value(value)
