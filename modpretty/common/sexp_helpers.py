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
S-Expression Helper Functions

Lookups over parsed footprint expressions, used by the output check and
the test-suite.
"""

from typing import List, Optional, Any

from .sexp_parser import parse_sexp


def find_element(sexp_list: List, name: str) -> Optional[List]:
    """Find first child list whose head is `name`."""
    if not isinstance(sexp_list, list):
        return None
    for item in sexp_list:
        if isinstance(item, list) and item and item[0] == name:
            return item
    return None


def find_elements(sexp_list: List, name: str) -> List[List]:
    """Find all child lists whose head is `name`."""
    if not isinstance(sexp_list, list):
        return []
    return [item for item in sexp_list
            if isinstance(item, list) and item and item[0] == name]


def get_atom_value(sexp_list: List, index: int = 1, default: Any = None) -> Any:
    """Get the atom at `index`, or `default` if the list is too short."""
    if not isinstance(sexp_list, list) or len(sexp_list) <= index:
        return default
    return sexp_list[index]


def check_footprint(content: str, expected_name: str) -> List[str]:
    """
    Check emitted footprint text.

    Returns a list of problems; an empty list means the text parses as one
    `module` expression named `expected_name` with a layer clause.
    """
    try:
        tree = parse_sexp(content)
    except ValueError as e:
        return [str(e)]

    problems = []
    if get_atom_value(tree, 0) != 'module':
        problems.append(f"top-level expression is {get_atom_value(tree, 0)!r}, not 'module'")
    # quote_text() drops embedded quotes, so compare without them
    expected_name = expected_name.replace('"', '')
    name = get_atom_value(tree, 1)
    if name != expected_name:
        problems.append(f"footprint name {name!r} does not match {expected_name!r}")
    if find_element(tree, 'layer') is None:
        problems.append("missing (layer ...) clause")
    return problems
