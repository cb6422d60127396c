import json
import os
import sys
import time

from wclint.ast_parser import ParseJsError, parse_js_file
from wclint.ast_walker import walk_ast
from wclint.engine_factory import build_engine
from wclint.rule_engine import SEVERITIES


USAGE = (
    "Usage: wclint [--text] [--rules a,b] [--loose] [--rule-option RULE=JSON] "
    "[--severity RULE=LEVEL] [--debug] FILE..."
)


class UsageError(ValueError):
    pass


def _round_ms(value):
    return round(max(0.0, float(value)), 3)


def _timing_ms(parse_ms, traversal_ms, interpretation_ms):
    total = parse_ms + traversal_ms + interpretation_ms
    return {
        "parse": _round_ms(parse_ms),
        "traversal": _round_ms(traversal_ms),
        "interpretation": _round_ms(interpretation_ms),
        "total": _round_ms(total),
    }


def _parser_items(source_tree):
    return [
        {
            "severity": "error",
            "source": "parser",
            "rule": None,
            "message_id": None,
            "line": problem.line,
            "column": problem.column,
            "message": problem.message,
        }
        for problem in source_tree.syntax_errors
    ]


def _limited_analysis_item(first_error_line=None):
    return {
        "severity": "warning",
        "source": "runtime",
        "rule": None,
        "message_id": None,
        "line": first_error_line if isinstance(first_error_line, int) else None,
        "column": None,
        "message": (
            "Rule-based checks were skipped because syntax errors were found. "
            "Fix syntax errors first, then run the linter again."
        ),
    }


def _failed_item(message):
    return {
        "severity": "error",
        "source": "runtime",
        "rule": None,
        "message_id": None,
        "line": None,
        "column": None,
        "message": message,
    }


def _summary(items):
    out = {"error": 0, "warning": 0}
    by_rule = {}
    for item in items:
        sev = item.get("severity", "error")
        if sev not in out:
            sev = "error"
        out[sev] += 1

        rule = item.get("rule")
        if rule:
            by_rule[rule] = by_rule.get(rule, 0) + 1

    out["total"] = out["error"] + out["warning"]
    out["by_rule"] = by_rule
    return out


def _sort_items(items):
    severity_rank = {"error": 0, "warning": 1}
    return sorted(
        items,
        key=lambda i: (
            i.get("line") if isinstance(i.get("line"), int) else 10**9,
            i.get("column") if isinstance(i.get("column"), int) else 0,
            severity_rank.get(i.get("severity", "error"), 2),
            i.get("source", ""),
        ),
    )


def lint_file(filename, engine, debug=False):
    path = os.path.realpath(filename)

    parse_start = time.perf_counter()
    try:
        source_tree = parse_js_file(filename)
    except ParseJsError as exc:
        parse_ms = (time.perf_counter() - parse_start) * 1000.0
        message = f"Failed to parse {os.path.basename(filename)}: {exc}"
        items = [_failed_item(message)]
        return {
            "file": filename,
            "path": path,
            "ok": False,
            "error": message,
            "items": items,
            "summary": _summary(items),
            "timing_ms": _timing_ms(parse_ms, 0.0, 0.0),
        }
    parse_ms = (time.perf_counter() - parse_start) * 1000.0

    traversal_start = time.perf_counter()
    nodes = []
    walk_ast(source_tree.program, nodes, debug=debug)
    traversal_ms = (time.perf_counter() - traversal_start) * 1000.0

    parser_items = _parser_items(source_tree)

    interpretation_ms = 0.0
    rule_items = []
    if not parser_items:
        interpretation_start = time.perf_counter()
        rule_items = [d.to_item() for d in engine.run(nodes)]
        interpretation_ms = (time.perf_counter() - interpretation_start) * 1000.0

    combined_items = parser_items + rule_items
    if parser_items:
        first_error_line = min(item["line"] for item in parser_items)
        combined_items.append(_limited_analysis_item(first_error_line))

    items = _sort_items(combined_items)
    return {
        "file": filename,
        "path": path,
        "ok": True,
        "error": None,
        "items": items,
        "summary": _summary(items),
        "timing_ms": _timing_ms(parse_ms, traversal_ms, interpretation_ms),
    }


def _pop_flag(args, flag):
    if flag not in args:
        return False
    args[:] = [a for a in args if a != flag]
    return True


def _pop_values(args, flag):
    values = []
    while flag in args:
        idx = args.index(flag)
        if idx + 1 >= len(args):
            raise UsageError(f"Missing value after {flag}.")
        values.append(args[idx + 1])
        del args[idx : idx + 2]
    return values


def _split_assignment(flag, raw):
    rule_id, sep, value = raw.partition("=")
    if not sep or not rule_id.strip():
        raise UsageError(f"Expected RULE=VALUE after {flag}, got '{raw}'.")
    return rule_id.strip(), value.strip()


def parse_args(args):
    args = list(args)
    _pop_flag(args, "--text")
    config = {
        "debug": _pop_flag(args, "--debug"),
        "enabled_rules": None,
        "rule_options": {},
        "severities": {},
    }

    if _pop_flag(args, "--loose"):
        config["rule_options"]["no-invalid-element-name"] = {"loose": True}

    raw_rules = _pop_values(args, "--rules")
    if raw_rules:
        config["enabled_rules"] = [r.strip() for r in raw_rules[-1].split(",") if r.strip()]

    for raw in _pop_values(args, "--rule-option"):
        rule_id, value = _split_assignment("--rule-option", raw)
        try:
            options = json.loads(value)
        except json.JSONDecodeError as exc:
            raise UsageError(f"Options for '{rule_id}' are not valid JSON: {exc.msg}.") from exc
        config["rule_options"][rule_id] = options

    for raw in _pop_values(args, "--severity"):
        rule_id, level = _split_assignment("--severity", raw)
        if level not in SEVERITIES:
            raise UsageError(
                f"Unknown severity '{level}' for '{rule_id}'. Valid severities: {', '.join(sorted(SEVERITIES))}."
            )
        config["severities"][rule_id] = level

    unknown_flags = [a for a in args if a.startswith("--")]
    if unknown_flags:
        raise UsageError(f"Unknown option(s): {', '.join(unknown_flags)}. {USAGE}")

    if not args:
        raise UsageError(f"No files provided. {USAGE}")

    config["files"] = args
    return config


def _print_error(message, json_mode):
    if json_mode:
        print(json.dumps({"ok": False, "error": message}))
    else:
        print(message)


def _format_item(result, item):
    location = result["file"]
    if isinstance(item.get("line"), int):
        location += f":{item['line']}"
        if isinstance(item.get("column"), int):
            location += f":{item['column']}"
    suffix = f" [{item['rule']}]" if item.get("rule") else ""
    return f"{location}: {item['severity']} {item['message']}{suffix}"


def _print_text(results):
    for idx, result in enumerate(results):
        if len(results) > 1:
            print(f"=== {result['file']} ===")

        for item in result["items"]:
            print(_format_item(result, item))

        timing = result["timing_ms"]
        print(
            f"[timing] parse: {timing['parse']} ms, traversal: {timing['traversal']} ms, "
            f"interpretation: {timing['interpretation']} ms, total: {timing['total']} ms."
        )

        if idx < len(results) - 1:
            print()


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    json_mode = "--text" not in args

    try:
        config = parse_args(args)
        engine = build_engine(
            config["enabled_rules"],
            rule_options=config["rule_options"],
            severities=config["severities"],
        )
    except ValueError as exc:
        _print_error(str(exc), json_mode)
        return 2

    overall_start = time.perf_counter()
    results = [lint_file(filename, engine, debug=config["debug"]) for filename in config["files"]]

    if json_mode:
        total_ms = _round_ms((time.perf_counter() - overall_start) * 1000.0)
        print(
            json.dumps(
                {
                    "ok": True,
                    "results": results,
                    "timing_ms": {"total": total_ms},
                    "rules": engine.rule_ids,
                }
            )
        )
    else:
        _print_text(results)

    has_errors = any(r["summary"]["error"] for r in results)
    return 1 if has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
