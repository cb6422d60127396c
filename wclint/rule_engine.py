from dataclasses import dataclass


SEVERITIES = {"error", "warn", "off"}

_SCHEMA_TYPES = {
    "boolean": (bool,),
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
}


class InvalidRuleOptions(ValueError):
    pass


@dataclass
class Diagnostic:
    rule_id: str
    message_id: str
    message: str
    severity: str
    line: int
    column: int

    def to_item(self):
        return {
            "severity": "warning" if self.severity == "warn" else "error",
            "source": "rule",
            "rule": self.rule_id,
            "message_id": self.message_id,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }


class RuleContext:
    """
    Handed to BaseRule.create(). Exposes the resolved options and
    collects reports for one rule during one run.
    """

    def __init__(self, rule, options, severity, sink):
        self.rule = rule
        self.rule_id = rule.rule_id
        self.options = list(options)
        self.severity = severity
        self._sink = sink

    def report(self, *, message_id, node):
        template = self.rule.messages[message_id]
        self._sink.append(
            Diagnostic(
                rule_id=self.rule_id,
                message_id=message_id,
                message=template,
                severity=self.severity,
                line=node.line,
                column=node.column,
            )
        )


def _check_value(rule_id, name, value, prop_schema):
    expected = prop_schema.get("type")
    if expected is None:
        return
    types = _SCHEMA_TYPES.get(expected)
    if types is None:
        raise InvalidRuleOptions(f"Rule '{rule_id}' declares unsupported option type '{expected}'.")
    # bool is an int subclass
    if isinstance(value, bool) and expected != "boolean":
        types = ()
    if not isinstance(value, types):
        raise InvalidRuleOptions(
            f"Rule '{rule_id}': option '{name}' should be {expected}, got {type(value).__name__}."
        )


def validate_options(rule, options):
    schema = list(rule.schema or [])
    if len(options) > len(schema):
        raise InvalidRuleOptions(
            f"Rule '{rule.rule_id}' accepts {len(schema)} option(s), got {len(options)}."
        )

    for option, option_schema in zip(options, schema):
        if option_schema.get("type") != "object":
            continue
        if not isinstance(option, dict):
            raise InvalidRuleOptions(f"Rule '{rule.rule_id}' expects an object of options.")

        properties = option_schema.get("properties", {})
        for name, value in option.items():
            if name not in properties:
                if option_schema.get("additionalProperties", True) is False:
                    raise InvalidRuleOptions(f"Rule '{rule.rule_id}' has no option named '{name}'.")
                continue
            _check_value(rule.rule_id, name, value, properties[name])


def _normalized_entry(entry):
    if isinstance(entry, tuple):
        rule, options, severity = entry
        if options is None:
            options = []
        elif not isinstance(options, (list, tuple)):
            options = [options]
        return rule, list(options), severity
    return entry, [], "error"


class RuleEngine:
    """
    Dispatches a flat list of AST nodes to every rule's handler table
    and collects diagnostics.
    """

    def __init__(self, rules):
        self.rules = [_normalized_entry(r) for r in rules]

        for rule, options, severity in self.rules:
            if severity not in SEVERITIES:
                raise InvalidRuleOptions(
                    f"Rule '{rule.rule_id}' has unknown severity '{severity}'. "
                    f"Valid severities: {', '.join(sorted(SEVERITIES))}."
                )
            validate_options(rule, options)

    @property
    def rule_ids(self):
        return [rule.rule_id for rule, _options, severity in self.rules if severity != "off"]

    def run(self, nodes):
        diagnostics = []

        tables = []
        for rule, options, severity in self.rules:
            if severity == "off":
                continue
            context = RuleContext(rule, options, severity, diagnostics)
            tables.append(rule.create(context))

        for node in nodes:
            for handlers in tables:
                # Check if the rule listens for this kind of node
                callback = handlers.get(node.kind)
                if callback is not None:
                    callback(node)

        return sorted(diagnostics, key=lambda d: (d.line, d.column))
