# src/amp_sanitizer/dom/css.py
import re
from typing import Dict, Optional

_LENGTH_PATTERN = re.compile(r'^(?P<numeral>\d+(?:\.\d+)?)(?P<unit>px|em|rem|vh|vw|vmin|vmax)?$')


class CssLength:
    """
    Validator for a CSS length used as an AMP layout dimension.

    Accepts a non-negative numeral with an optional unit (px, em, rem, vh,
    vw, vmin, vmax); the unit defaults to px. `auto` and `fluid` are only
    valid when explicitly allowed. Percentages are never valid.
    """

    PX = "px"

    def __init__(self, value: Optional[str]):
        self.value = value.strip() if value is not None else None
        self.is_set = value is not None
        self.is_valid = False
        self.is_auto = False
        self.is_fluid = False
        self.numeral: Optional[str] = None
        self.unit = self.PX

    def validate(self, allow_auto: bool = False, allow_fluid: bool = False) -> "CssLength":
        if not self.is_set:
            return self

        if self.value == "auto":
            self.is_auto = True
            self.is_valid = allow_auto
            return self

        if self.value == "fluid":
            self.is_fluid = True
            self.is_valid = allow_fluid
            return self

        match = _LENGTH_PATTERN.match(self.value)
        if match:
            self.is_valid = True
            self.numeral = match.group("numeral")
            self.unit = match.group("unit") or self.PX
        return self

    def to_attribute_value(self) -> str:
        """Numeral followed by its unit, with the unit omitted for px."""
        if self.numeral is None:
            raise ValueError(f"Cannot render invalid CSS length {self.value!r}")
        numeral = format_numeral(self.numeral)
        return numeral if self.unit == self.PX else f"{numeral}{self.unit}"


def format_numeral(numeral: str) -> str:
    """Normalizes a matched numeral: '50.0' becomes '50', '007.50' becomes '7.5'."""
    integer, _, fraction = numeral.partition('.')
    integer = integer.lstrip('0') or '0'
    fraction = fraction.rstrip('0')
    return f"{integer}.{fraction}" if fraction else integer


def parse_style_string(style: str) -> Dict[str, str]:
    """Parses an inline style attribute into an ordered property -> value mapping."""
    styles: Dict[str, str] = {}
    for pair in style.split(';'):
        if ':' not in pair:
            continue
        prop, value = (part.strip() for part in pair.split(':', 1))
        if prop:
            styles[prop.lower()] = value
    return styles


def reassemble_style_string(styles: Dict[str, str]) -> str:
    return ';'.join(f"{prop}:{value}" for prop, value in styles.items())
