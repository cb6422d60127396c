import sys

from wclint.ast_parser import parse_js_file
from wclint.ast_walker import walk_ast
from wclint.nodes import (
    BinaryExpression,
    Identifier,
    Literal,
    LogicalExpression,
    MethodDefinition,
    OtherNode,
    UnaryExpression,
)


def _label(node):
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, Literal):
        return node.raw
    if isinstance(node, MethodDefinition):
        return node.name or "<computed>"
    if isinstance(node, OtherNode):
        return node.type_name
    if isinstance(node, (BinaryExpression, LogicalExpression, UnaryExpression)):
        return node.operator
    return ""


def _parent_chain(node, limit=3):
    chain = []
    cur = node.parent
    while cur is not None and len(chain) < limit:
        chain.append(cur.kind.value)
        cur = cur.parent
    return " -> ".join(chain)


def dump_lines(nodes, line_start=None, line_end=None):
    lines = []
    for n in nodes:
        if line_start is not None and line_end is not None:
            if n.line < line_start or n.line > line_end:
                continue
        lines.append(
            f"line={n.line} column={n.column} kind={n.kind.value} "
            f"label={_label(n)} parents={_parent_chain(n)}"
        )
    return lines


def main():
    if len(sys.argv) < 2:
        print("Usage: python3 -m wclint.debug_dump <file> [line_start] [line_end]")
        sys.exit(1)

    filename = sys.argv[1]
    line_start = int(sys.argv[2]) if len(sys.argv) > 2 else None
    line_end = int(sys.argv[3]) if len(sys.argv) > 3 else None

    source_tree = parse_js_file(filename)
    nodes = []
    walk_ast(source_tree.program, nodes)

    for problem in source_tree.syntax_errors:
        print(f"{source_tree.filename}:{problem.line}:{problem.column}: syntax error {problem.message}")

    for text in dump_lines(nodes, line_start, line_end):
        print(text)


if __name__ == "__main__":
    main()
