from wclint.rule_engine import RuleEngine

from wclint.guard_super_call_rule import GuardSuperCallRule
from wclint.no_invalid_element_name_rule import NoInvalidElementNameRule


ALL_RULES = {
    NoInvalidElementNameRule.rule_id: NoInvalidElementNameRule,
    GuardSuperCallRule.rule_id: GuardSuperCallRule,
}

RECOMMENDED_SEVERITIES = {
    "no-invalid-element-name": "error",
    "guard-super-call": "error",
}


def _unknown_rules_error(names):
    return ValueError(
        "Unknown rule(s): "
        + ", ".join(sorted(names))
        + ". Valid rules: "
        + ", ".join(sorted(ALL_RULES))
        + "."
    )


def _normalized_rules(enabled_rules):
    if not enabled_rules:
        return list(ALL_RULES)
    unknown = {r for r in enabled_rules if r not in ALL_RULES}
    if unknown:
        raise _unknown_rules_error(unknown)
    return [r for r in ALL_RULES if r in set(enabled_rules)]


def build_engine(enabled_rules=None, rule_options=None, severities=None):
    rule_options = rule_options or {}
    severities = severities or {}

    unknown = (set(rule_options) | set(severities)) - set(ALL_RULES)
    if unknown:
        raise _unknown_rules_error(unknown)

    entries = []
    for rule_id in _normalized_rules(enabled_rules):
        rule = ALL_RULES[rule_id]()
        options = rule_options.get(rule_id)
        if options is None:
            options = []
        elif not isinstance(options, list):
            options = [options]
        severity = severities.get(rule_id, RECOMMENDED_SEVERITIES[rule_id])
        entries.append((rule, options, severity))

    return RuleEngine(entries)
