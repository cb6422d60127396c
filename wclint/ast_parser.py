import os
from dataclasses import dataclass, field

import tree_sitter_javascript
from tree_sitter import Language, Parser

from wclint.nodes import (
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    MethodDefinition,
    OtherNode,
    Program,
    Super,
    UnaryExpression,
)


JS_LANGUAGE = Language(tree_sitter_javascript.language())

_COMMENT_TYPES = {"comment", "html_comment"}
_LOGICAL_OPERATORS = {"&&", "||", "??"}
_IDENTIFIER_TYPES = {
    "identifier",
    "property_identifier",
    "private_property_identifier",
    "shorthand_property_identifier",
    "undefined",
}
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class ParseJsError(RuntimeError):
    pass


@dataclass
class SyntaxProblem:
    line: int
    column: int
    message: str


@dataclass
class SourceTree:
    program: Program
    syntax_errors: list = field(default_factory=list)
    filename: str | None = None


def _decode_escape(text):
    body = text[1:]
    if not body:
        return ""
    if body[0] in "\r\n\u2028\u2029":
        return ""
    if body[0] in "01234567" and len(body) > 1 and body.isdigit():
        return chr(int(body, 8))
    if body[0] == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if body[0] == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        return chr(int(digits, 16))
    return _SIMPLE_ESCAPES.get(body[0], body[0])


def _number_value(raw):
    text = raw.replace("_", "")
    if text.endswith("n"):
        text = text[:-1]
    lowered = text.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        return int(lowered, 0)
    if lowered.isdigit():
        if len(lowered) > 1 and lowered.startswith("0") and set(lowered) <= set("01234567"):
            return int(lowered, 8)
        return int(lowered, 10)
    try:
        return float(lowered)
    except ValueError:
        return raw


class _Converter:
    """
    Turns a tree-sitter JavaScript tree into the closed node model in
    wclint.nodes. Parentheses are dropped the same way ESTree drops them.
    """

    def __init__(self, source_bytes):
        self.source = source_bytes
        self.lines = source_bytes.split(b"\n")
        self.handlers = {
            "program": self._convert_program,
            "statement_block": self._convert_statement_block,
            "expression_statement": self._convert_expression_statement,
            "parenthesized_expression": self._convert_parenthesized_expression,
            "if_statement": self._convert_if_statement,
            "call_expression": self._convert_call_expression,
            "member_expression": self._convert_member_expression,
            "subscript_expression": self._convert_subscript_expression,
            "super": self._convert_super,
            "string": self._convert_string,
            "number": self._convert_number,
            "true": self._convert_true,
            "false": self._convert_false,
            "null": self._convert_null,
            "binary_expression": self._convert_binary_expression,
            "unary_expression": self._convert_unary_expression,
            "method_definition": self._convert_method_definition,
        }

    def position(self, ts_node):
        row, col = ts_node.start_point
        line_bytes = self.lines[row] if row < len(self.lines) else b""
        column = len(line_bytes[:col].decode("utf-8", errors="replace")) + 1
        return row + 1, column

    def text(self, ts_node):
        return self.source[ts_node.start_byte:ts_node.end_byte].decode("utf-8", errors="replace")

    def named(self, ts_node):
        return [c for c in ts_node.named_children if c.type not in _COMMENT_TYPES]

    def convert_all(self, ts_nodes):
        return [self.convert(n) for n in ts_nodes]

    def convert(self, ts_node):
        kind = ts_node.type
        handler = self.handlers.get(kind)
        if handler is not None:
            return handler(ts_node)

        line, column = self.position(ts_node)
        if kind in _IDENTIFIER_TYPES:
            return Identifier(line, column, name=self.text(ts_node))
        return OtherNode(line, column, type_name=kind, body=self.convert_all(self.named(ts_node)))

    def _field(self, ts_node, name):
        child = ts_node.child_by_field_name(name)
        if child is None:
            return None
        return self.convert(child)

    def _has_optional_chain(self, ts_node):
        return any(c.type == "optional_chain" for c in ts_node.children)

    def _convert_program(self, ts_node):
        line, column = self.position(ts_node)
        return Program(line, column, body=self.convert_all(self.named(ts_node)))

    def _convert_statement_block(self, ts_node):
        line, column = self.position(ts_node)
        return BlockStatement(line, column, body=self.convert_all(self.named(ts_node)))

    def _convert_expression_statement(self, ts_node):
        line, column = self.position(ts_node)
        inner = self.named(ts_node)
        if not inner:
            return OtherNode(line, column, type_name="empty_statement")
        return ExpressionStatement(line, column, expression=self.convert(inner[0]))

    def _convert_parenthesized_expression(self, ts_node):
        inner = self.named(ts_node)
        if len(inner) != 1:
            line, column = self.position(ts_node)
            return OtherNode(line, column, type_name=ts_node.type, body=self.convert_all(inner))
        return self.convert(inner[0])

    def _convert_if_statement(self, ts_node):
        line, column = self.position(ts_node)
        alternate = None
        else_clause = ts_node.child_by_field_name("alternative")
        if else_clause is not None:
            branch = self.named(else_clause)
            alternate = self.convert(branch[0]) if branch else None
        return IfStatement(
            line,
            column,
            test=self._field(ts_node, "condition"),
            consequent=self._field(ts_node, "consequence"),
            alternate=alternate,
        )

    def _convert_call_expression(self, ts_node):
        line, column = self.position(ts_node)
        callee = self._field(ts_node, "function")
        args_node = ts_node.child_by_field_name("arguments")

        if args_node is not None and args_node.type != "arguments":
            # tagged template
            return OtherNode(
                line,
                column,
                type_name="tagged_template",
                body=[callee, self.convert(args_node)],
            )

        arguments = self.convert_all(self.named(args_node)) if args_node is not None else []
        return CallExpression(
            line,
            column,
            callee=callee,
            arguments=arguments,
            optional=self._has_optional_chain(ts_node),
        )

    def _convert_member_expression(self, ts_node):
        line, column = self.position(ts_node)
        return MemberExpression(
            line,
            column,
            object=self._field(ts_node, "object"),
            property=self._field(ts_node, "property"),
            computed=False,
            optional=self._has_optional_chain(ts_node),
        )

    def _convert_subscript_expression(self, ts_node):
        line, column = self.position(ts_node)
        return MemberExpression(
            line,
            column,
            object=self._field(ts_node, "object"),
            property=self._field(ts_node, "index"),
            computed=True,
            optional=self._has_optional_chain(ts_node),
        )

    def _convert_super(self, ts_node):
        line, column = self.position(ts_node)
        return Super(line, column)

    def _convert_string(self, ts_node):
        line, column = self.position(ts_node)
        parts = []
        for child in ts_node.named_children:
            text = self.text(child)
            if child.type == "escape_sequence":
                parts.append(_decode_escape(text))
            else:
                parts.append(text)
        return Literal(line, column, value="".join(parts), raw=self.text(ts_node))

    def _convert_number(self, ts_node):
        line, column = self.position(ts_node)
        raw = self.text(ts_node)
        return Literal(line, column, value=_number_value(raw), raw=raw)

    def _convert_true(self, ts_node):
        line, column = self.position(ts_node)
        return Literal(line, column, value=True, raw="true")

    def _convert_false(self, ts_node):
        line, column = self.position(ts_node)
        return Literal(line, column, value=False, raw="false")

    def _convert_null(self, ts_node):
        line, column = self.position(ts_node)
        return Literal(line, column, value=None, raw="null")

    def _convert_binary_expression(self, ts_node):
        # Left-nested chains (`a + b + c + ...`) are built bottom-up in a
        # loop so long concatenations stay within the recursion limit.
        spine = [ts_node]
        leftmost = ts_node.child_by_field_name("left")
        while leftmost is not None and leftmost.type == "binary_expression":
            spine.append(leftmost)
            leftmost = leftmost.child_by_field_name("left")

        expr = self.convert(leftmost) if leftmost is not None else None
        for bin_node in reversed(spine):
            line, column = self.position(bin_node)
            operator = bin_node.child_by_field_name("operator").type
            right = self._field(bin_node, "right")
            node_cls = LogicalExpression if operator in _LOGICAL_OPERATORS else BinaryExpression
            expr = node_cls(line, column, operator=operator, left=expr, right=right)
        return expr

    def _convert_unary_expression(self, ts_node):
        line, column = self.position(ts_node)
        return UnaryExpression(
            line,
            column,
            operator=ts_node.child_by_field_name("operator").type,
            argument=self._field(ts_node, "argument"),
        )

    def _convert_method_definition(self, ts_node):
        line, column = self.position(ts_node)
        name_node = ts_node.child_by_field_name("name")
        name = None
        if name_node is not None:
            if name_node.type in _IDENTIFIER_TYPES:
                name = self.text(name_node)
            elif name_node.type == "string":
                name = self._convert_string(name_node).value

        body = self._field(ts_node, "body")
        return MethodDefinition(
            line,
            column,
            name=name,
            params=self._field(ts_node, "parameters"),
            body=body if isinstance(body, BlockStatement) else None,
        )


def _syntax_problems(converter, root):
    problems = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR":
            line, column = converter.position(node)
            token = converter.text(node).strip().splitlines()
            snippet = token[0][:20] if token else ""
            problems.append(SyntaxProblem(line, column, f"Unexpected token '{snippet}'"))
            continue
        if node.is_missing:
            line, column = converter.position(node)
            problems.append(SyntaxProblem(line, column, f"Missing '{node.type}'"))
            continue
        if node.has_error:
            stack.extend(node.children)

    problems.sort(key=lambda p: (p.line, p.column))
    return problems


def parse_js_source(text, filename=None):
    source_bytes = text.encode("utf-8")
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(source_bytes)

    converter = _Converter(source_bytes)
    try:
        program = converter.convert(tree.root_node)
    except RecursionError as exc:
        name = os.path.basename(filename) if filename else "source"
        raise ParseJsError(f"'{name}' is nested too deeply to analyse.") from exc
    problems = _syntax_problems(converter, tree.root_node) if tree.root_node.has_error else []
    return SourceTree(program=program, syntax_errors=problems, filename=filename)


def parse_js_file(filename):
    if not os.path.exists(filename):
        raise ParseJsError(f"Input file does not exist: {filename}")
    if not os.path.isfile(filename):
        raise ParseJsError(f"Input path is not a file: {filename}")

    base = os.path.basename(filename)
    try:
        with open(filename, "rb") as fh:
            raw = fh.read()
    except OSError as exc:
        raise ParseJsError(f"Could not read '{base}': {exc.strerror}.") from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseJsError(f"Could not decode '{base}' as UTF-8.") from exc

    return parse_js_source(text, filename=filename)
