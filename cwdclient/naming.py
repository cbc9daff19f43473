"""Name conversion between the Python call surface and the wire encoding.

Wire names (variant tags and field keys) are lowercase words joined by
underscores. Callers may spell the same name in camelCase, PascalCase or
snake_case, optionally with a trailing underscore used to dodge a Python
keyword; all of them collapse to one wire name.
"""

from __future__ import annotations

import keyword
import re

# Parameter names owned by the execute surface (transaction metadata) and the method itself.
RESERVED_PARAM_NAMES = frozenset({"self", "fee", "memo", "funds"})

_WORD_SEPARATORS = "- "


def to_wire_name(name: str) -> str:
    """Convert an external name to its wire spelling.

    ``startAfter`` -> ``start_after``, ``TotalPowerAtHeight`` ->
    ``total_power_at_height``, ``from_`` -> ``from``. Already-converted names
    come back unchanged.
    """
    base = name.rstrip("_") or name
    result: list[str] = []
    for i, char in enumerate(base):
        if char in _WORD_SEPARATORS:
            result.append("_")
            continue
        if char.isupper():
            prev = base[i - 1] if i > 0 else ""
            nxt = base[i + 1] if i + 1 < len(base) else ""
            starts_word = prev.islower() or prev.isdigit() or (prev.isupper() and nxt.islower())
            if prev and prev not in "_" + _WORD_SEPARATORS and starts_word:
                result.append("_")
            result.append(char.lower())
        else:
            result.append(char)
    return "".join(result)


def to_external_name(name: str) -> str:
    """Convert a wire name to camelCase."""
    components = to_wire_name(name).split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def to_class_name(name: str) -> str:
    """Convert a contract name (``cwd-voting-cw4``) to a class prefix (``CwdVotingCw4``)."""
    parts = [p for p in re.split(r"[-_\s.]+", to_wire_name(name)) if p]
    return "".join(p[:1].upper() + p[1:] for p in parts) or "Contract"


def to_param_name(wire_name: str) -> str:
    """Python parameter name for a wire field; keywords and reserved names get a trailing ``_``."""
    if keyword.iskeyword(wire_name) or wire_name in RESERVED_PARAM_NAMES:
        return wire_name + "_"
    return wire_name
