from wclint.base_rule import BaseRule
from wclint.element_name import is_best_practice_element_name, is_valid_element_name
from wclint.nodes import CallExpression, Identifier, Literal, MemberExpression, NodeKind


class NoInvalidElementNameRule(BaseRule):
    """
    Reports tag names passed to customElements.define() that are not
    valid custom element names, or that go against common naming
    practice unless the `loose` option is set.
    """

    rule_id = "no-invalid-element-name"
    description = "Disallows invalid custom element names"
    url = "docs/rules/no-invalid-element-name.md"
    messages = {
        "invalidElementName": (
            "Element name is invalid and should follow the HTML standard's recommendations"
            "(https://html.spec.whatwg.org/multipage/custom-elements.html#prod-potentialcustomelementname)."
        ),
    }
    schema = [
        {
            "type": "object",
            "properties": {
                "loose": {"type": "boolean"},
            },
            "additionalProperties": False,
        }
    ]

    def __init__(self, name_validator=is_valid_element_name):
        self.name_validator = name_validator

    def _is_identifier(self, node, name):
        return isinstance(node, Identifier) and node.name == name

    def _is_registry(self, node):
        if self._is_identifier(node, "customElements"):
            return True
        return (
            isinstance(node, MemberExpression)
            and not node.computed
            and self._is_identifier(node.object, "window")
            and self._is_identifier(node.property, "customElements")
        )

    def is_define_call(self, node):
        callee = node.callee
        return (
            isinstance(callee, MemberExpression)
            and not callee.computed
            and self._is_registry(callee.object)
            and self._is_identifier(callee.property, "define")
        )

    def create(self, context):
        options = context.options[0] if context.options else {}
        loose = bool(options.get("loose", False))

        def check_call(node: CallExpression) -> None:
            if not self.is_define_call(node) or not node.arguments:
                return

            first_arg = node.arguments[0]
            if not isinstance(first_arg, Literal) or not isinstance(first_arg.value, str):
                return

            name = first_arg.value
            valid = self.name_validator(name)
            discouraged = not loose and not is_best_practice_element_name(name)

            if not valid or discouraged:
                context.report(message_id="invalidElementName", node=first_arg)

        return {NodeKind.CALL_EXPRESSION: check_call}
