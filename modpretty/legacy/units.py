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
Units and layers of the legacy format.

Legacy coordinates are decimils (0.1 mil) unless the library declares
`Units mm`. Layers are numbered; bits of the pad layer mask use the same
numbering.
"""

from typing import List, Optional

from .mod_parser import ModNode


# mm per decimil
DEFAULT_SCALE = 2.54e-3
METRIC_SCALE = 1.0

INCH_TO_MM = 25.4

LAYER_NAMES = {
    0: 'B.Cu',
    15: 'F.Cu',
    16: 'B.Adhes',
    17: 'F.Adhes',
    18: 'B.Paste',
    19: 'F.Paste',
    20: 'B.SilkS',
    21: 'F.SilkS',
    22: 'B.Mask',
    23: 'F.Mask',
    24: 'Dwgs.User',
    25: 'Cmts.User',
    26: 'Eco1.User',
    27: 'Eco2.User',
    28: 'Edge.Cuts',
}

DEFAULT_LAYER = 'F.SilkS'

ALL_LAYERS_MASK = 0xFFFFFFFF
# Technical layers only; copper of a through-hole pad is written as *.Cu
THROUGH_HOLE_MASK = 0xFFFF0000


def parse_layer_id(layer_id: str) -> Optional[int]:
    try:
        return int(layer_id)
    except (TypeError, ValueError):
        return None


def lookup_layer(layer_id: str) -> Optional[str]:
    """Layer name for `layer_id`, or None if it is not in the table."""
    return LAYER_NAMES.get(parse_layer_id(layer_id))


def layer_name(layer_id: str, default: str = DEFAULT_LAYER) -> str:
    name = lookup_layer(layer_id)
    return name if name is not None else default


def parse_mask(mask: str) -> Optional[int]:
    """Parse a hexadecimal layer mask, with or without a 0x prefix."""
    text = mask.strip()
    if text[:2].lower() == '0x':
        text = text[2:]
    try:
        return int(text, 16)
    except ValueError:
        return None


def layers_from_mask(mask: str, test_mask: int = ALL_LAYERS_MASK) -> List[str]:
    """Names of the layers whose bits are set in `mask & test_mask`, lowest bit first."""
    bits = parse_mask(mask)
    if bits is None:
        return []
    bits &= test_mask

    layers = []
    index = 0
    while bits:
        if bits & 1 and index in LAYER_NAMES:
            layers.append(LAYER_NAMES[index])
        bits >>= 1
        index += 1
    return layers


def declares_metric(node: Optional[ModNode]) -> bool:
    if node is None:
        return False
    units = node.first('Units')
    return units is not None and len(units) > 1 and units[1].lower() == 'mm'


def resolve_scale(module: ModNode, current: float = DEFAULT_SCALE) -> float:
    """
    Scale to use for `module`.

    A `Units mm` record on the module's parent switches to 1:1; otherwise
    the file's current scale is kept.
    """
    if declares_metric(module.parent):
        return METRIC_SCALE
    return current
