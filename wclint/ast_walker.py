import sys


def walk_ast(node, nodes, *, debug=False, parent=None):
    """
    Walks a converted syntax tree and collects all nodes into a flat
    list for the rule engine.

    Nodes are appended in depth-first, source order. Each node gets
    its parent link set so rules can look upwards. An explicit stack
    is used so deeply nested trees don't hit the recursion limit.
    """

    stack = [(node, parent)]
    while stack:
        current, current_parent = stack.pop()
        current.parent = current_parent
        nodes.append(current)

        if debug:
            print("VISITING:", current.kind.value, file=sys.stderr)

        children = [c for c in current.children() if c is not None]
        stack.extend((child, current) for child in reversed(children))

    return node
