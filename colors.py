"""
Color helpers shared by the customizer routes and the AI designer.

Validation is data-driven: a list of required keys plus a hex-color
predicate, so it can be exercised without any network call.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
REQUIRED_COLOR_KEYS = ("sole", "upper", "laces", "logo")
RESERVED_BLACK = "#000000"


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and HEX_COLOR_PATTERN.match(value) is not None


@dataclass
class ColorSchemeResult:
    """Outcome of validating a color scheme.

    Either ``ok`` with ``colors`` filled in, or not ok with the first
    offending ``field`` and a ``reason`` of ``missing``, ``malformed`` or
    ``not_an_object``.
    """
    ok: bool
    colors: Dict[str, str] = field(default_factory=dict)
    field: Optional[str] = None
    reason: Optional[str] = None


def validate_color_scheme(obj: Any) -> ColorSchemeResult:
    if not isinstance(obj, Mapping):
        return ColorSchemeResult(ok=False, reason="not_an_object")
    colors: Dict[str, str] = {}
    for key in REQUIRED_COLOR_KEYS:
        if key not in obj or obj[key] is None or obj[key] == "":
            return ColorSchemeResult(ok=False, field=key, reason="missing")
        if not is_hex_color(obj[key]):
            return ColorSchemeResult(ok=False, field=key, reason="malformed")
        colors[key] = obj[key]
    return ColorSchemeResult(ok=True, colors=colors)


def reserved_black_conflict(current: Mapping[str, Any], update: Mapping[str, Any]) -> Optional[str]:
    """Return a user-facing message if ``update`` would leave logo and upper both pure black.

    Only applies when the update touches the logo or the upper.
    """
    if "logo" not in update and "upper" not in update:
        return None
    logo = str(update.get("logo", current.get("logo", ""))).lower()
    upper = str(update.get("upper", current.get("upper", ""))).lower()
    if logo != RESERVED_BLACK or upper != RESERVED_BLACK:
        return None
    if "logo" in update:
        return "Cannot use black logo on black upper - it won't be visible!"
    return "Cannot use black upper with black logo - logo won't be visible!"
