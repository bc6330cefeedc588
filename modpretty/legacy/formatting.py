#!/usr/bin/env python3
#
# This program source code file is part of modpretty, a KiCad footprint library converter.
#
# Copyright (C) 2025-2026 modpretty Developers Team
# Copyright The modpretty Developers, see AUTHORS.txt for contributors.
#
# This program is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by the
# Free Software Foundation, either version 3 of the License, or (at your
# option) any later version.
#
# This program is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program.  If not, see <http://www.gnu.org/licenses/>.

"""
Number and text formatting for .kicad_mod output.

All numbers are written with a '.' decimal point and at most six
fractional digits, independent of locale.
"""

import math
import re
from typing import Optional, Union


ROTATION_EPSILON = 0.001

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def parse_number(text: str) -> Optional[float]:
    """Parse a finite decimal; None for anything else (including nan/inf)."""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def format_number(value: float, digits: int = 6) -> str:
    """Fixed-point with trailing zeros removed; never '-0'."""
    text = f"{value:.{digits}f}".rstrip('0').rstrip('.')
    if text in ('', '-0'):
        return '0'
    return text


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def quote_text(text: str) -> str:
    """
    Format free text as an S-expression atom.

    Empty text becomes "". Text with whitespace, parentheses or quotes is
    wrapped in quotes with any embedded quotes dropped and backslashes
    escaped.
    """
    if not text:
        return '""'
    if any(c.isspace() or c in '()"' for c in text):
        return '"' + text.replace('\\', '\\\\').replace('"', '') + '"'
    return text


def safe_filename(name: str) -> str:
    """Replace characters that are not valid in file names."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub('_', name).strip()
    return cleaned or '_'


class UnitFormatter:
    """Converts legacy field text to scaled .kicad_mod numbers."""

    def __init__(self, scale: float):
        self.scale = scale

    def scaled(self, value: Union[str, float]) -> Optional[float]:
        number = parse_number(value) if isinstance(value, str) else value
        if number is None:
            return None
        return number * self.scale

    def num(self, value: Union[str, float]) -> str:
        """Scaled value; unparsable text becomes 0."""
        scaled = self.scaled(value)
        return format_number(scaled) if scaled is not None else '0'

    def xy(self, x: Union[str, float], y: Union[str, float]) -> str:
        return f"{self.num(x)} {self.num(y)}"

    @staticmethod
    def rotation(tenths: Union[str, float]) -> str:
        """Angle clause suffix for a rotation in tenths of a degree, or ''."""
        value = parse_number(tenths) if isinstance(tenths, str) else tenths
        if value is None:
            return ''
        degrees = value / 10.0
        if abs(degrees) <= ROTATION_EPSILON:
            return ''
        return ' ' + format_number(degrees, digits=3)

    def at(self, x: Union[str, float], y: Union[str, float], tenths: Union[str, float] = 0) -> str:
        """Body of an (at ...) clause: 'X Y' plus the angle when it is not ~0."""
        return self.xy(x, y) + self.rotation(tenths)

    def offset(self, x: Union[str, float], y: Union[str, float]) -> str:
        """' (offset X Y)' for a non-zero drill offset, else ''."""
        dx = self.scaled(x) or 0.0
        dy = self.scaled(y) or 0.0
        if dx == 0 and dy == 0:
            return ''
        return f" (offset {format_number(dx)} {format_number(dy)})"
