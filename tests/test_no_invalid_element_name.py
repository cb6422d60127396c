import unittest

from wclint.ast_parser import parse_js_source
from wclint.ast_walker import walk_ast
from wclint.no_invalid_element_name_rule import NoInvalidElementNameRule
from wclint.rule_engine import RuleEngine


VALID_NAMES = [
    "foo-bar",
    "my-element",
    "a-b",
    "foo-bar-baz",
    "my-elem_1",
    "emotion-\U0001F60D",
    "math-α",
]

DISCOURAGED_NAMES = [
    "ng-foo",
    "x-foo",
    "xml-foo",
    "polymer-foo",
    "foo-",
    "foo--bar",
    "foo.bar-baz",
]

INVALID_NAMES = [
    "foo",
    "Foo-bar",
    "foo-Bar",
    "1-foo",
    "-foo",
    "foo bar-",
    "font-face",
    "annotation-xml",
    "",
]


def run_rule(code, options=None, rule=None):
    tree = parse_js_source(code)
    if tree.syntax_errors:
        raise RuntimeError(f"Fixture does not parse: {tree.syntax_errors}")

    nodes = []
    walk_ast(tree.program, nodes)
    rule = rule or NoInvalidElementNameRule()
    return RuleEngine([(rule, options or [], "error")]).run(nodes)


def define(name, registry="customElements"):
    return f"{registry}.define('{name}', class extends HTMLElement {{}});"


class NoInvalidElementNameTest(unittest.TestCase):
    def test_valid_names_are_not_reported(self):
        for name in VALID_NAMES:
            with self.subTest(name=name):
                self.assertEqual(run_rule(define(name)), [])

    def test_discouraged_names_are_reported_once(self):
        for name in DISCOURAGED_NAMES:
            with self.subTest(name=name):
                diagnostics = run_rule(define(name))
                self.assertEqual([d.message_id for d in diagnostics], ["invalidElementName"])

    def test_discouraged_names_pass_in_loose_mode(self):
        for name in DISCOURAGED_NAMES:
            with self.subTest(name=name):
                self.assertEqual(run_rule(define(name), options=[{"loose": True}]), [])

    def test_loose_false_behaves_like_default(self):
        self.assertEqual(len(run_rule(define("x-foo"), options=[{"loose": False}])), 1)

    def test_invalid_names_are_reported_even_in_loose_mode(self):
        for name in INVALID_NAMES:
            for options in ([], [{"loose": True}]):
                with self.subTest(name=name, options=options):
                    self.assertEqual(len(run_rule(define(name), options=options)), 1)

    def test_window_custom_elements_is_detected(self):
        self.assertEqual(len(run_rule(define("foo", registry="window.customElements"))), 1)
        self.assertEqual(run_rule(define("foo-bar", registry="window.customElements")), [])

    def test_diagnostic_is_anchored_at_the_name_literal(self):
        diagnostics = run_rule("const a = 1;\ncustomElements.define('foo', Foo);\n")
        self.assertEqual(len(diagnostics), 1)
        self.assertEqual((diagnostics[0].line, diagnostics[0].column), (2, 23))
        self.assertIn("custom-elements.html", diagnostics[0].message)

    def test_escaped_names_are_decoded_before_checking(self):
        self.assertEqual(run_rule("customElements.define('foo\\u002Dbar', Foo);"), [])

    def test_dynamic_or_missing_names_are_skipped(self):
        for code in (
            "customElements.define(name, Foo);",
            "customElements.define(`foo`, Foo);",
            "customElements.define();",
            "customElements.define(42, Foo);",
            "customElements.define(prefix + '-foo', Foo);",
        ):
            with self.subTest(code=code):
                self.assertEqual(run_rule(code), [])

    def test_other_registries_are_ignored(self):
        for code in (
            "registry.define('foo', Foo);",
            "customElements.get('foo');",
            "customElements['define']('foo', Foo);",
            "self.customElements.define('foo', Foo);",
            "define('foo', Foo);",
        ):
            with self.subTest(code=code):
                self.assertEqual(run_rule(code), [])

    def test_define_after_long_concatenation_is_checked(self):
        code = "const banner = " + " + ".join(["'a'"] * 1000) + ";\n" + define("x-foo")
        diagnostics = run_rule(code)
        self.assertEqual([(d.line, d.column) for d in diagnostics], [(2, 23)])

    def test_nested_define_calls_are_found(self):
        code = """
        export function register() {
          if (!customElements.get('good-name')) {
            customElements.define('bad', Bad);
          }
        }
        """
        diagnostics = run_rule(code)
        self.assertEqual([d.line for d in diagnostics], [4])

    def test_name_validator_is_injectable(self):
        seen = []

        def validator(name):
            seen.append(name)
            return True

        rule = NoInvalidElementNameRule(name_validator=validator)
        self.assertEqual(run_rule(define("anything"), options=[{"loose": True}], rule=rule), [])
        self.assertEqual(seen, ["anything"])

    def test_validator_errors_propagate(self):
        def validator(name):
            raise TypeError("boom")

        rule = NoInvalidElementNameRule(name_validator=validator)
        with self.assertRaises(TypeError):
            run_rule(define("foo-bar"), rule=rule)

    def test_meta(self):
        meta = NoInvalidElementNameRule().meta
        self.assertEqual(meta["schema"][0]["properties"], {"loose": {"type": "boolean"}})
        self.assertFalse(meta["schema"][0]["additionalProperties"])
        self.assertIn("invalidElementName", meta["messages"])


if __name__ == "__main__":
    unittest.main()
