import unittest

from wclint.ast_parser import parse_js_source
from wclint.ast_walker import walk_ast
from wclint.base_rule import BaseRule
from wclint.engine_factory import ALL_RULES, build_engine
from wclint.guard_super_call_rule import GuardSuperCallRule
from wclint.no_invalid_element_name_rule import NoInvalidElementNameRule
from wclint.nodes import NodeKind
from wclint.rule_engine import InvalidRuleOptions, RuleEngine


FIXTURE = """customElements.define('x-foo', class extends HTMLElement {
  connectedCallback() {
    super.connectedCallback();
  }
});
customElements.define('foo', Foo);
"""


def nodes_for(code):
    tree = parse_js_source(code)
    nodes = []
    walk_ast(tree.program, nodes)
    return nodes


class IdentifierCollector(BaseRule):
    rule_id = "collect-identifiers"
    messages = {"seen": "Identifier seen"}

    def __init__(self):
        self.names = []
        self.options_seen = None

    def create(self, context):
        self.options_seen = context.options

        def on_identifier(node):
            self.names.append(node.name)
            if node.name == "flagged":
                context.report(message_id="seen", node=node)

        return {NodeKind.IDENTIFIER: on_identifier}


class RuleEngineTest(unittest.TestCase):
    def test_dispatches_by_node_kind(self):
        rule = IdentifierCollector()
        diagnostics = RuleEngine([rule]).run(nodes_for("a(b); flagged;"))
        self.assertEqual(rule.names, ["a", "b", "flagged"])
        self.assertEqual(len(diagnostics), 1)
        self.assertEqual(diagnostics[0].message, "Identifier seen")
        self.assertEqual(diagnostics[0].severity, "error")
        self.assertEqual(rule.options_seen, [])

    def test_unknown_message_id_raises(self):
        class BadRule(BaseRule):
            rule_id = "bad"
            messages = {}

            def create(self, context):
                return {NodeKind.IDENTIFIER: lambda node: context.report(message_id="nope", node=node)}

        with self.assertRaises(KeyError):
            RuleEngine([BadRule()]).run(nodes_for("a;"))

    def test_base_rule_requires_create(self):
        with self.assertRaises(NotImplementedError):
            BaseRule().create(None)

    def test_diagnostics_from_all_rules_are_sorted(self):
        engine = RuleEngine([GuardSuperCallRule(), NoInvalidElementNameRule()])
        diagnostics = engine.run(nodes_for(FIXTURE))
        self.assertEqual(
            [(d.rule_id, d.line, d.column) for d in diagnostics],
            [
                ("no-invalid-element-name", 1, 23),
                ("guard-super-call", 3, 5),
                ("no-invalid-element-name", 6, 23),
            ],
        )

    def test_off_rules_do_not_run(self):
        engine = RuleEngine([(GuardSuperCallRule(), [], "off"), NoInvalidElementNameRule()])
        self.assertEqual(engine.rule_ids, ["no-invalid-element-name"])
        diagnostics = engine.run(nodes_for(FIXTURE))
        self.assertEqual({d.rule_id for d in diagnostics}, {"no-invalid-element-name"})

    def test_warn_severity_becomes_warning_item(self):
        engine = RuleEngine([(GuardSuperCallRule(), [], "warn")])
        item = engine.run(nodes_for(FIXTURE))[0].to_item()
        self.assertEqual(item["severity"], "warning")
        self.assertEqual(item["source"], "rule")
        self.assertEqual(item["message_id"], "guardSuperCall")


class OptionValidationTest(unittest.TestCase):
    def test_valid_options(self):
        RuleEngine([(NoInvalidElementNameRule(), [{"loose": True}], "error")])
        RuleEngine([(NoInvalidElementNameRule(), [{}], "error")])

    def test_wrong_option_type(self):
        with self.assertRaises(InvalidRuleOptions):
            RuleEngine([(NoInvalidElementNameRule(), [{"loose": "yes"}], "error")])
        with self.assertRaises(InvalidRuleOptions):
            RuleEngine([(NoInvalidElementNameRule(), [{"loose": 1}], "error")])

    def test_unknown_option(self):
        with self.assertRaises(InvalidRuleOptions) as ctx:
            RuleEngine([(NoInvalidElementNameRule(), [{"strict": True}], "error")])
        self.assertIn("strict", str(ctx.exception))

    def test_non_object_option(self):
        with self.assertRaises(InvalidRuleOptions):
            RuleEngine([(NoInvalidElementNameRule(), [True], "error")])

    def test_rule_without_options_rejects_any(self):
        with self.assertRaises(InvalidRuleOptions):
            RuleEngine([(GuardSuperCallRule(), [{}], "error")])

    def test_unknown_severity(self):
        with self.assertRaises(InvalidRuleOptions):
            RuleEngine([(GuardSuperCallRule(), [], "fatal")])


class EngineFactoryTest(unittest.TestCase):
    def test_all_rules_enabled_by_default(self):
        engine = build_engine()
        self.assertEqual(engine.rule_ids, list(ALL_RULES))

    def test_enabled_rules_filter(self):
        engine = build_engine(["guard-super-call"])
        self.assertEqual(engine.rule_ids, ["guard-super-call"])

    def test_unknown_rule(self):
        with self.assertRaises(ValueError) as ctx:
            build_engine(["no-such-rule"])
        self.assertIn("Valid rules", str(ctx.exception))

    def test_options_for_unknown_rule(self):
        with self.assertRaises(ValueError):
            build_engine(rule_options={"no-such-rule": {}})

    def test_options_dict_is_wrapped(self):
        engine = build_engine(rule_options={"no-invalid-element-name": {"loose": True}})
        diagnostics = engine.run(nodes_for(FIXTURE))
        self.assertEqual(
            [(d.rule_id, d.line) for d in diagnostics],
            [("guard-super-call", 3), ("no-invalid-element-name", 6)],
        )

    def test_scalar_options_are_rejected(self):
        for options in (5, True, 1.5, "loose"):
            with self.subTest(options=options):
                with self.assertRaises(InvalidRuleOptions) as ctx:
                    build_engine(rule_options={"no-invalid-element-name": options})
                self.assertIn("expects an object", str(ctx.exception))

    def test_severity_override(self):
        engine = build_engine(severities={"guard-super-call": "off"})
        self.assertEqual(engine.rule_ids, ["no-invalid-element-name"])


if __name__ == "__main__":
    unittest.main()
