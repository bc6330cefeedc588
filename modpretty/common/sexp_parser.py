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
S-Expression Reader

Strict recursive reader for the .kicad_mod text produced by the emitter.
Unlike KiCad itself it rejects trailing data and unbalanced parentheses,
which is exactly what the post-conversion check needs to catch.
"""

from typing import List, Any


class SexpReader:
    """Recursive S-expression reader with position tracking.

    Atoms are kept as strings: footprint and pad names such as ``0805`` or
    ``01`` must survive unchanged.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def error(self, message: str) -> ValueError:
        line = self.text.count('\n', 0, self.pos) + 1
        return ValueError(f"{message} (line {line}, offset {self.pos})")

    def skip_whitespace(self):
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1

    def read_document(self) -> List:
        """Read exactly one top-level list; anything after it is an error."""
        self.skip_whitespace()
        if self.pos >= self.length or self.text[self.pos] != '(':
            raise self.error("Expected '(' at start of document")
        result = self.read_list()
        self.skip_whitespace()
        if self.pos < self.length:
            raise self.error("Unexpected data after top-level expression")
        return result

    def read_list(self) -> List:
        self.pos += 1  # '('
        items: List[Any] = []
        while True:
            self.skip_whitespace()
            if self.pos >= self.length:
                raise self.error("Unclosed parenthesis")
            char = self.text[self.pos]
            if char == ')':
                self.pos += 1
                return items
            if char == '(':
                items.append(self.read_list())
            elif char == '"':
                items.append(self.read_string())
            else:
                items.append(self.read_atom())

    def read_atom(self) -> str:
        start = self.pos
        while self.pos < self.length:
            char = self.text[self.pos]
            if char.isspace() or char in '()':
                break
            if char == '"':
                raise self.error("Quote inside bare atom")
            self.pos += 1
        return self.text[start:self.pos]

    def read_string(self) -> str:
        """Read a quoted string; only \\\\ and \\" escapes are recognised."""
        self.pos += 1  # opening quote
        chars = []
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == '\\' and self.pos + 1 < self.length and self.text[self.pos + 1] in '\\"':
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            if char == '"':
                self.pos += 1
                return ''.join(chars)
            chars.append(char)
            self.pos += 1
        raise self.error("Unterminated string")


def parse_sexp(text: str) -> List:
    """
    Parse a single S-expression document into nested Python lists.

    Raises:
        ValueError: If the text is not exactly one balanced expression
    """
    return SexpReader(text).read_document()
