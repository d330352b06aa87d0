"""
Schwift Programming Language Parser
Recursive-descent grammar built with pyparsing, producing AST nodes directly
"""

from typing import Any, List, Tuple
import sys
import time

from pyparsing import (
    Forward, Keyword, Literal as PyParsingLiteral, Regex, Suppress, ZeroOrMore,
    OneOrMore, Optional as PyParsingOptional, Group, StringEnd, Located,
    MatchFirst, ParseBaseException, ParserElement, infixNotation, oneOf, opAssoc
)

from error_handling import SchwiftParseError
from syntax_tree import (
    Literal, Variable, ListIndex, ListLength, Not, BinaryOperator, Operator,
    Assignment, Print, Input, Delete, ListNew, ListAppend, ListAssign,
    ListDelete, If, While, Catch, Expression, Statement
)
from values import Value, make_int, make_string, make_bool, TRUE_KEYWORD, FALSE_KEYWORD

ParserElement.enablePackrat()

# Newlines separate statements, so they are not skippable whitespace
SCHWIFT_WHITESPACE = " \t\r"


RESERVED_WORDS = (
    "squanch", "assimilate", "show", "portal", "shoot", "if", "else", "while",
    "schwifty", "getschwifty", "and", "or", TRUE_KEYWORD, FALSE_KEYWORD,
)

# Rules reachable through parse_prefix and SchwiftParser.parse_rule
RULE_NAMES = (
    "integer", "string", "boolean", "literal", "identifier", "expression",
    "statement", "block", "while_loop", "if_statement", "catch_statement",
    "list_instantiation", "program",
)


def _fold_left(tokens) -> Expression:
    """Turn [a, op, b, op, c] into ((a op b) op c)"""
    items = tokens[0]
    result = items[0]
    for i in range(1, len(items), 2):
        result = BinaryOperator(result, Operator.from_symbol(items[i]), items[i + 1])
    return result


class SchwiftGrammar:
    """Schwift grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        # Elements take their whitespace from the default when created; restore
        # it afterwards so other pyparsing users keep newline skipping
        previous = ParserElement.DEFAULT_WHITE_CHARS
        ParserElement.setDefaultWhitespaceChars(SCHWIFT_WHITESPACE)
        try:
            self._setup_grammar()
        finally:
            ParserElement.setDefaultWhitespaceChars(previous)

    def _setup_grammar(self):
        """Setup the Schwift grammar; every rule builds AST nodes in its parse action"""

        expression = Forward()
        statement = Forward()

        kw = Keyword

        # Literals
        integer = Regex(r"[0-9]+").setName("integer")
        integer.setParseAction(lambda t: make_int(int(t[0])))

        # Contents are taken verbatim, no escape processing
        string = Regex(r'"[^"]*"').setName("string")
        string.setParseAction(lambda t: make_string(t[0][1:-1]))

        boolean = (kw(TRUE_KEYWORD) | kw(FALSE_KEYWORD)).setName("boolean")
        boolean.setParseAction(lambda t: make_bool(t[0] == TRUE_KEYWORD))

        literal = (integer | string | boolean).setName("literal")

        # Identifiers
        reserved = MatchFirst([kw(word) for word in RESERVED_WORDS])
        identifier = (~reserved + Regex(r"[A-Za-z_][A-Za-z0-9_]*")).setName("identifier")

        # Separators and blocks
        newline = Suppress(PyParsingLiteral("\n")).setName("newline")
        newlines = OneOrMore(newline)
        blank_lines = ZeroOrMore(newline)

        statement_list = PyParsingOptional(statement + ZeroOrMore(newlines + statement))

        # Once a block is open, failures inside it are reported where they happen
        block = (
            Suppress(":<") - blank_lines - Group(statement_list) - blank_lines - Suppress(">:")
        ).setName("block")
        block.setParseAction(lambda t: [tuple(t[0])])

        # Operands
        literal_expr = literal.copy().addParseAction(lambda t: Literal(t[0]))
        variable = identifier.copy().setParseAction(lambda t: Variable(t[0]))
        list_length = (identifier + Suppress(kw("squanch"))).setParseAction(
            lambda t: ListLength(t[0])
        )
        list_index = (identifier + Suppress("[") + expression + Suppress("]")).setParseAction(
            lambda t: ListIndex(t[0], t[1])
        )

        # Negation covers the whole expression that follows it: !x == y is !(x == y)
        not_expr = (Suppress("!") + expression).setName("negation")
        not_expr.setParseAction(lambda t: Not(t[0]))

        operand = not_expr | literal_expr | list_length | list_index | variable

        comparison_op = Regex(r"<=|>=|<(?!:)|>(?!:)").setName("comparison operator")

        operation = infixNotation(operand, [
            (oneOf("* / %"), 2, opAssoc.LEFT, _fold_left),
            (oneOf("+ -"), 2, opAssoc.LEFT, _fold_left),
            (comparison_op, 2, opAssoc.LEFT, _fold_left),
            (oneOf("== !="), 2, opAssoc.LEFT, _fold_left),
            (kw("and"), 2, opAssoc.LEFT, _fold_left),
            (kw("or"), 2, opAssoc.LEFT, _fold_left),
        ])
        expression <<= operation
        expression.setName("expression")

        # Statements
        assignment = (identifier + Suppress(kw("squanch")) + expression).setParseAction(
            lambda t: Assignment(t[0], t[1])
        )
        print_statement = (
            Suppress(kw("show") + kw("me") + kw("what") + kw("you") + kw("got")) + expression
        ).setParseAction(lambda t: Print(t[0]))
        input_statement = (Suppress(kw("portal") + kw("gun")) + identifier).setParseAction(
            lambda t: Input(t[0])
        )
        delete_statement = (Suppress(kw("shoot")) + identifier).setParseAction(
            lambda t: Delete(t[0])
        )
        list_instantiation = (identifier + Suppress(kw("on") + kw("a") + kw("cob"))).setParseAction(
            lambda t: ListNew(t[0])
        )
        list_append = (identifier + Suppress(kw("assimilate")) + expression).setParseAction(
            lambda t: ListAppend(t[0], t[1])
        )
        list_assign = (
            identifier + Suppress("[") + expression + Suppress("]") + Suppress(kw("squanch")) + expression
        ).setParseAction(lambda t: ListAssign(t[0], t[1], t[2]))
        list_delete = (
            Suppress(kw("squanch")) + identifier + Suppress("[") + expression + Suppress("]")
        ).setParseAction(lambda t: ListDelete(t[0], t[1]))

        if_statement = (
            Suppress(kw("if")) + expression + block
            + PyParsingOptional(blank_lines + Suppress(kw("else")) + block)
        ).setParseAction(lambda t: If(t[0], t[1], t[2] if len(t) > 2 else None))
        while_loop = (Suppress(kw("while")) + expression + block).setParseAction(
            lambda t: While(t[0], t[1])
        )
        catch_statement = (
            Suppress(kw("schwifty")) + block + blank_lines + Suppress(kw("getschwifty")) + block
        ).setParseAction(lambda t: Catch(t[0], t[1]))

        statement <<= (
            if_statement | while_loop | catch_statement | print_statement | input_statement
            | delete_statement | list_delete | list_instantiation | list_append | list_assign
            | assignment
        )
        statement.setName("statement")

        program = (blank_lines + Group(statement_list) + blank_lines + StringEnd()).setName("program")
        program.setParseAction(lambda t: [list(t[0])])

        # Store the main parsers
        self.integer = integer
        self.string = string
        self.boolean = boolean
        self.literal = literal
        self.identifier = identifier
        self.expression = expression
        self.statement = statement
        self.block = block
        self.while_loop = while_loop
        self.if_statement = if_statement
        self.catch_statement = catch_statement
        self.list_instantiation = list_instantiation
        self.program = program

        # Tabs inside string literals are part of the program text
        for name in RULE_NAMES:
            getattr(self, name).parseWithTabs()

    def rule(self, name: str) -> ParserElement:
        if name not in RULE_NAMES:
            raise ValueError(f"Unknown grammar rule: {name}")
        return getattr(self, name)

    def parse_all(self, name: str, text: str, filename: str = "<input>") -> Any:
        """Parse the whole of text with the named rule"""
        try:
            result = self.rule(name).parseString(text, parseAll=True)
        except ParseBaseException as e:
            raise SchwiftParseError.from_exception(e, text, filename) from e
        return result[0]

    def parse_prefix(self, name: str, text: str, filename: str = "<input>") -> Tuple[Any, str]:
        """Parse the longest prefix of text matching the named rule

        Returns the parsed unit and the unconsumed remainder of text.
        """
        located = Located(self.rule(name)).parseWithTabs()
        try:
            result = located.parseString(text)
        except ParseBaseException as e:
            raise SchwiftParseError.from_exception(e, text, filename) from e
        tokens, end = result[1], result[2]
        return tokens[0], text[end:]


class SchwiftParser:
    """Main Schwift parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = SchwiftGrammar(debug)

    def parse_file(self, filepath: str) -> List[Statement]:
        """Parse a Schwift source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> List[Statement]:
        """Parse a complete Schwift program"""
        started = time.perf_counter()
        statements = self.grammar.parse_all("program", text, filename)
        if self.debug:
            elapsed = (time.perf_counter() - started) * 1000
            print(f"DEBUG: parsed {len(statements)} top-level statements from {filename} "
                  f"in {elapsed:.2f}ms", file=sys.stderr)
        return statements

    def parse_statement(self, text: str, filename: str = "<input>") -> Statement:
        """Parse a single Schwift statement"""
        return self.grammar.parse_all("statement", text, filename)

    def parse_block(self, text: str, filename: str = "<input>") -> Tuple[Statement, ...]:
        """Parse a ':< ... >:' block"""
        return self.grammar.parse_all("block", text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> Expression:
        """Parse a single Schwift expression"""
        return self.grammar.parse_all("expression", text, filename)

    def parse_literal(self, text: str, filename: str = "<input>") -> Value:
        """Parse a single literal value"""
        return self.grammar.parse_all("literal", text, filename)

    def parse_rule(self, name: str, text: str, filename: str = "<input>") -> Any:
        return self.grammar.parse_all(name, text, filename)

    def parse_prefix(self, name: str, text: str, filename: str = "<input>") -> Tuple[Any, str]:
        return self.grammar.parse_prefix(name, text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> SchwiftParser:
    """Create a Schwift parser"""
    return SchwiftParser(debug=debug)


def create_debug_parser() -> SchwiftParser:
    """Create a Schwift parser with debug enabled"""
    return SchwiftParser(debug=True)


_default_parser = None


def default_parser() -> SchwiftParser:
    """Shared parser used by the module-level helpers"""
    global _default_parser
    if _default_parser is None:
        _default_parser = create_parser()
    return _default_parser


def parse_program(text: str, filename: str = "<input>") -> List[Statement]:
    return default_parser().parse_string(text, filename)


def parse_statement(text: str) -> Statement:
    return default_parser().parse_statement(text)


def parse_block(text: str) -> Tuple[Statement, ...]:
    return default_parser().parse_block(text)


def parse_expression(text: str) -> Expression:
    return default_parser().parse_expression(text)


def parse_literal(text: str) -> Value:
    return default_parser().parse_literal(text)


def parse_prefix(name: str, text: str) -> Tuple[Any, str]:
    return default_parser().parse_prefix(name, text)
