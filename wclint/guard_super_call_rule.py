from wclint.base_rule import BaseRule
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
    NodeKind,
    OtherNode,
    Super,
    UnaryExpression,
    is_function_like,
)


LIFECYCLE_METHODS = (
    "connectedCallback",
    "disconnectedCallback",
    "adoptedCallback",
    "attributeChangedCallback",
)

_EQUALITY_OPERATORS = {"===", "=="}
_INEQUALITY_OPERATORS = {"!==", "!="}


class GuardSuperCallRule(BaseRule):
    """
    Requires a guard before calling a super method inside a custom
    element lifecycle callback. Not every base class implements every
    callback, so `super.connectedCallback()` may throw.

    Only syntactic guards are recognised:

        if (super.connectedCallback) { super.connectedCallback(); }
        super.connectedCallback && super.connectedCallback();
        super.connectedCallback?.();
    """

    rule_id = "guard-super-call"
    description = "Requires a guard before calling a super method inside a Custom Element Lifecycle hook"
    url = "docs/rules/guard-super-call.md"
    messages = {
        "guardSuperCall": (
            "Super calls to lifecycle callbacks should be guarded in case the base class "
            "does not implement them"
        ),
    }
    schema = []

    def _is_super_member(self, node):
        if not isinstance(node, MemberExpression) or not isinstance(node.object, Super):
            return False
        if node.computed:
            return isinstance(node.property, Literal) and isinstance(node.property.value, str)
        return isinstance(node.property, Identifier)

    def _is_typeof_super(self, node):
        return (
            isinstance(node, UnaryExpression)
            and node.operator == "typeof"
            and self._is_super_member(node.argument)
        )

    def _is_literal(self, node, value):
        return isinstance(node, Literal) and node.value == value and type(node.value) is type(value)

    def _is_undefined(self, node):
        return (isinstance(node, Identifier) and node.name == "undefined") or self._is_literal(node, None)

    def _compares_super(self, node):
        pairs = ((node.left, node.right), (node.right, node.left))
        if node.operator in _EQUALITY_OPERATORS:
            return any(self._is_typeof_super(a) and self._is_literal(b, "function") for a, b in pairs)
        if node.operator in _INEQUALITY_OPERATORS:
            return any(
                (self._is_typeof_super(a) and self._is_literal(b, "undefined"))
                or (self._is_super_member(a) and self._is_undefined(b))
                for a, b in pairs
            )
        return False

    def is_guard(self, test):
        """
        True when `test` only passes if an inherited member exists:
        `super.x`, `!!super.x`, `typeof super.x === 'function'`,
        `super.x !== undefined`, or an `&&` chain holding one of these.
        """
        if self._is_super_member(test):
            return True
        if isinstance(test, UnaryExpression) and test.operator == "!":
            inner = test.argument
            return isinstance(inner, UnaryExpression) and inner.operator == "!" and self.is_guard(inner.argument)
        if isinstance(test, BinaryExpression):
            return self._compares_super(test)
        if isinstance(test, LogicalExpression) and test.operator == "&&":
            return any(self.is_guard(operand) for operand in self._and_operands(test))
        return False

    def _and_operands(self, test):
        operands = []
        stack = [test]
        while stack:
            node = stack.pop()
            if isinstance(node, LogicalExpression) and node.operator == "&&":
                stack.extend((node.right, node.left))
            else:
                operands.append(node)
        return operands

    def is_super_call(self, node, name):
        if not isinstance(node, CallExpression):
            return False
        callee = node.callee
        return (
            isinstance(callee, MemberExpression)
            and isinstance(callee.object, Super)
            and not callee.computed
            and isinstance(callee.property, Identifier)
            and callee.property.name == name
        )

    def _is_optional_call(self, call):
        return call.optional or call.callee.optional

    def _statement_calls(self, statement, name, guarded):
        expr = statement.expression

        if self.is_super_call(expr, name):
            if not guarded and not self._is_optional_call(expr):
                yield expr
            return

        if isinstance(expr, LogicalExpression) and expr.operator == "&&" and self.is_super_call(expr.right, name):
            call = expr.right
            if not guarded and not self.is_guard(expr.left) and not self._is_optional_call(call):
                yield call

    def unguarded_calls(self, node, name, guarded=False):
        """
        Yield every statement-level `super.<name>()` call under `node`
        that is not reached through a guard, in source order.
        """
        if node is None:
            return

        if isinstance(node, ExpressionStatement):
            yield from self._statement_calls(node, name, guarded)
        elif isinstance(node, BlockStatement):
            for statement in node.body:
                yield from self.unguarded_calls(statement, name, guarded)
        elif isinstance(node, IfStatement):
            yield from self.unguarded_calls(node.consequent, name, guarded or self.is_guard(node.test))
            yield from self.unguarded_calls(node.alternate, name, guarded)
        elif isinstance(node, OtherNode) and not is_function_like(node):
            # loops, try/catch, switch, labelled statements
            for child in node.body:
                yield from self.unguarded_calls(child, name, guarded)

    def create(self, context):
        def check_method(node: MethodDefinition) -> None:
            if node.name not in LIFECYCLE_METHODS:
                return
            for call in self.unguarded_calls(node.body, node.name):
                context.report(message_id="guardSuperCall", node=call)

        return {NodeKind.METHOD_DEFINITION: check_method}
