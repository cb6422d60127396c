from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class NodeKind(Enum):
    PROGRAM = "Program"
    METHOD_DEFINITION = "MethodDefinition"
    BLOCK_STATEMENT = "BlockStatement"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    IF_STATEMENT = "IfStatement"
    CALL_EXPRESSION = "CallExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    IDENTIFIER = "Identifier"
    SUPER = "Super"
    LITERAL = "Literal"
    LOGICAL_EXPRESSION = "LogicalExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    OTHER = "Other"


@dataclass(eq=False)
class Node:
    """
    Common location data. `line` and `column` are both 1-based.
    `parent` is filled in by the walker.
    """

    kind: ClassVar[NodeKind]

    line: int
    column: int
    parent: "Node | None" = field(default=None, repr=False, kw_only=True)

    def children(self):
        return []


@dataclass(eq=False)
class Program(Node):
    kind: ClassVar[NodeKind] = NodeKind.PROGRAM

    body: list

    def children(self):
        return list(self.body)


@dataclass(eq=False)
class BlockStatement(Node):
    kind: ClassVar[NodeKind] = NodeKind.BLOCK_STATEMENT

    body: list

    def children(self):
        return list(self.body)


@dataclass(eq=False)
class MethodDefinition(Node):
    """
    A method in a class body or an object literal. `name` is None for
    computed keys.
    """

    kind: ClassVar[NodeKind] = NodeKind.METHOD_DEFINITION

    name: str | None
    params: Node | None
    body: BlockStatement | None

    def children(self):
        return [n for n in (self.params, self.body) if n is not None]


@dataclass(eq=False)
class ExpressionStatement(Node):
    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION_STATEMENT

    expression: Node

    def children(self):
        return [self.expression]


@dataclass(eq=False)
class IfStatement(Node):
    kind: ClassVar[NodeKind] = NodeKind.IF_STATEMENT

    test: Node
    consequent: Node
    alternate: Node | None

    def children(self):
        return [n for n in (self.test, self.consequent, self.alternate) if n is not None]


@dataclass(eq=False)
class CallExpression(Node):
    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPRESSION

    callee: Node
    arguments: list
    optional: bool = False

    def children(self):
        return [self.callee] + list(self.arguments)


@dataclass(eq=False)
class MemberExpression(Node):
    kind: ClassVar[NodeKind] = NodeKind.MEMBER_EXPRESSION

    object: Node
    property: Node
    computed: bool = False
    optional: bool = False

    def children(self):
        return [self.object, self.property]


@dataclass(eq=False)
class Identifier(Node):
    kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER

    name: str


@dataclass(eq=False)
class Super(Node):
    kind: ClassVar[NodeKind] = NodeKind.SUPER


@dataclass(eq=False)
class Literal(Node):
    """
    String, number, boolean or null literal. `value` holds the decoded
    Python value, `raw` the source text.
    """

    kind: ClassVar[NodeKind] = NodeKind.LITERAL

    value: object
    raw: str


@dataclass(eq=False)
class LogicalExpression(Node):
    kind: ClassVar[NodeKind] = NodeKind.LOGICAL_EXPRESSION

    operator: str
    left: Node
    right: Node

    def children(self):
        return [self.left, self.right]


@dataclass(eq=False)
class BinaryExpression(Node):
    kind: ClassVar[NodeKind] = NodeKind.BINARY_EXPRESSION

    operator: str
    left: Node
    right: Node

    def children(self):
        return [self.left, self.right]


@dataclass(eq=False)
class UnaryExpression(Node):
    kind: ClassVar[NodeKind] = NodeKind.UNARY_EXPRESSION

    operator: str
    argument: Node

    def children(self):
        return [self.argument]


@dataclass(eq=False)
class OtherNode(Node):
    """
    Any syntax the rules never match on directly. Keeps its children so
    nested code is still visited.
    """

    kind: ClassVar[NodeKind] = NodeKind.OTHER

    type_name: str
    body: list = field(default_factory=list)

    def children(self):
        return list(self.body)


def is_function_like(node):
    return isinstance(node, OtherNode) and node.type_name in FUNCTION_TYPES


FUNCTION_TYPES = {
    "function_expression",
    "function_declaration",
    "generator_function",
    "generator_function_declaration",
    "arrow_function",
    "class",
    "class_declaration",
}
