"""
Error model for Schwift: runtime error kinds, the statement wrapper,
and enhanced parse errors with detailed messages
"""

from typing import List, Optional, Dict, Union
from pyparsing import ParseBaseException
import re

from syntax_tree import summarize
from values import Value, repr_value, show_value, type_name, value_length


# ============================================================================
# RUNTIME ERROR KINDS
# ============================================================================

class SchwiftRuntimeError(Exception):
    """Base class of every error kind raised while evaluating a program"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownVariable(SchwiftRuntimeError):
    """Reference to a name with no binding in the symbol table"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown variable '{name}'")


class UnexpectedType(SchwiftRuntimeError):
    """A value of the wrong kind was supplied to an operation"""

    def __init__(self, expected: str, actual: Value):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected a value of type {expected}, got {type_name(actual)} {repr_value(actual)}"
        )


class IndexOutOfBounds(SchwiftRuntimeError):
    """Index is negative or not smaller than the container length"""

    def __init__(self, container: Value, index: int):
        self.container = container
        self.index = index
        super().__init__(
            f"Index {index} is out of bounds for {type_name(container)} {show_value(container)} "
            f"of length {value_length(container)}"
        )


class IndexUnindexable(SchwiftRuntimeError):
    """Index, length or list operation on a value that is neither list nor string"""

    def __init__(self, actual: Value):
        self.actual = actual
        super().__init__(f"Cannot index into {type_name(actual)} {repr_value(actual)}")


class InputError(SchwiftRuntimeError):
    """Reading a line from the input collaborator failed"""

    def __init__(self, cause: Union[OSError, UnicodeDecodeError]):
        self.cause = cause
        super().__init__(f"I/O error while reading input: {cause}")


class DivideByZero(SchwiftRuntimeError):
    """Integer division or modulo with a zero divisor"""

    def __init__(self, dividend: Value):
        self.dividend = dividend
        super().__init__(f"Cannot divide {show_value(dividend)} by zero")


class SchwiftError(Exception):
    """An error kind together with the statement that was executing when it occurred"""

    def __init__(self, kind: SchwiftRuntimeError, statement):
        self.kind = kind
        self.statement = statement
        super().__init__(self._format_error())

    @property
    def message(self) -> str:
        return self.kind.message

    def _format_error(self) -> str:
        return f"Error in statement '{summarize(self.statement)}': {self.kind.message}"


# ============================================================================
# PARSE ERRORS (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict, filename: str = "<input>") -> str:
    """Format parse error as string"""
    error_msg = f"Parse error in {filename} at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg.rstrip("\n")


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:  # Error line
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract expected tokens from exception"""
    # pyparsing only reports the expectation in its message text
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(at|$)", str(exc))
    if expected_match:
        return [expected_match.group(1)]
    return ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of line"
    return "end of input"


def generate_suggestions(source_text: str, line_num: int, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []
    lines = source_text.split('\n')
    error_line = lines[line_num - 1] if 0 < line_num <= len(lines) else ""

    if source_text.count(":<") > source_text.count(">:"):
        suggestions.append("A block opened with ':<' was never closed with '>:'")

    if "{" in got or "}" in got:
        suggestions.append("Blocks are written ':< ... >:' rather than with braces")

    if re.search(r"[A-Za-z_]\w*\s*=[^=]", error_line) and "==" not in error_line:
        suggestions.append("Assign with 'squanch', e.g. 'x squanch 10'")

    if "print" in error_line:
        suggestions.append("Print with 'show me what you got <expr>'")

    if re.search(r"\bcob\b", error_line) and not re.search(r"\bon\s+a\s+cob\b", error_line):
        suggestions.append("New lists are declared with '<name> on a cob'")

    if error_line.count('"') % 2 == 1:
        suggestions.append("String literal is missing its closing double quote")

    return suggestions


def enhance_parse_exception_dict(exc: ParseBaseException, source_text: str) -> Dict:
    """Convert pyparsing exception to enhanced Schwift error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, line_num, got)

    return make_parse_error(
        message=exc.msg,
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


class SchwiftParseError(Exception):
    """Parse failure carrying the position the parser reached"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: ParseBaseException, source_text: str,
                       filename: str = "<input>") -> "SchwiftParseError":
        error_dict = enhance_parse_exception_dict(exc, source_text)
        return cls(filename=filename, **error_dict)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return format_parse_error(error_dict, self.filename)
