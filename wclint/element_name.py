"""
Custom element name checks.

is_valid_element_name() follows the HTML "valid custom element name"
definition: the PotentialCustomElementName production, minus the
hyphenated names reserved by SVG and MathML.
"""

import re


_PCEN_CHAR = (
    "-._0-9a-z"
    "\xB7"
    "\xC0-\xD6"
    "\xD8-\xF6"
    "\xF8-\u037D"
    "\u037F-\u1FFF"
    "\u200C-\u200D"
    "\u203F-\u2040"
    "\u2070-\u218F"
    "\u2C00-\u2FEF"
    "\u3001-\uD7FF"
    "\uF900-\uFDCF"
    "\uFDF0-\uFFFD"
    "\U00010000-\U000EFFFF"
)

POTENTIAL_CUSTOM_ELEMENT_NAME = re.compile(
    rf"[a-z][{_PCEN_CHAR}]*-[{_PCEN_CHAR}]*"
)

RESERVED_NAMES = frozenset(
    {
        "annotation-xml",
        "color-profile",
        "font-face",
        "font-face-src",
        "font-face-uri",
        "font-face-format",
        "font-face-name",
        "missing-glyph",
    }
)

DISCOURAGED_PREFIXES = ("xml", "polymer-", "ng-", "x-")


def is_potential_custom_element_name(name):
    return POTENTIAL_CUSTOM_ELEMENT_NAME.fullmatch(name) is not None


def is_valid_element_name(name):
    return is_potential_custom_element_name(name) and name not in RESERVED_NAMES


def is_best_practice_element_name(name):
    """
    Names that are valid but clash with well-known framework prefixes
    or are easy to mistype.
    """
    return (
        not name.startswith(DISCOURAGED_PREFIXES)
        and not name.endswith("-")
        and "--" not in name
        and "." not in name
    )
