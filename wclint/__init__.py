from wclint.engine_factory import ALL_RULES, build_engine
from wclint.guard_super_call_rule import GuardSuperCallRule
from wclint.no_invalid_element_name_rule import NoInvalidElementNameRule

__all__ = [
    "ALL_RULES",
    "GuardSuperCallRule",
    "NoInvalidElementNameRule",
    "build_engine",
]
