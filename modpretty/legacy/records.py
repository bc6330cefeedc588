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
Typed views of legacy records.

Each legacy record is a positional field list. The dataclasses below name
those positions and supply defaults for missing trailing fields. A record
that is too short or has an unparsable required number raises
ModRecordError so the emitter can drop it and continue.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .formatting import parse_number, strip_quotes
from .mod_parser import ModNode
from .units import lookup_layer


# =============================================================================
# Exception Classes
# =============================================================================

class ModRecordError(ValueError):
    """Raised when a legacy record cannot be interpreted."""

    def __init__(self, message: str, tag: str = ''):
        self.tag = tag
        super().__init__(f"{tag or 'record'}: {message}")


def _require_length(fields: List[str], count: int):
    if len(fields) < count:
        raise ModRecordError(f"expected at least {count} fields, got {len(fields)}",
                             fields[0] if fields else '')


def _number(fields: List[str], index: int, default: Optional[float] = None) -> float:
    if index >= len(fields):
        if default is not None:
            return default
        raise ModRecordError(f"missing field {index}", fields[0] if fields else '')
    value = parse_number(fields[index])
    if value is None:
        raise ModRecordError(f"field {index} is not a number: {fields[index]!r}", fields[0])
    return value


def _field(fields: List[str], index: int, default: str = '') -> str:
    return fields[index] if index < len(fields) else default


# =============================================================================
# Module header
# =============================================================================

DEFAULT_PLACEMENT = ['Po', '0', '0', '0', '15', '0', '0', '~~']


@dataclass(frozen=True)
class PlacementRecord:
    """`Po X Y orient layer tedit tstamp status` of a $MODULE."""
    layer: str
    tedit: str
    locked: bool
    placed: bool

    LAYER_INDEX = 4
    FALLBACK_LAYER_INDEX = 3
    TEDIT_INDEX = 5
    # index 6 is the timestamp; the status flags follow it
    STATUS_INDEX = 7

    @classmethod
    def from_fields(cls, fields: Optional[List[str]]) -> 'PlacementRecord':
        if not fields:
            fields = DEFAULT_PLACEMENT

        # Index 4 is the documented layer field; some writers put it at 3.
        layer = lookup_layer(_field(fields, cls.LAYER_INDEX))
        if layer is None:
            layer = lookup_layer(_field(fields, cls.FALLBACK_LAYER_INDEX))
        if layer is None:
            layer = 'F.Cu'

        if len(fields) > cls.TEDIT_INDEX:
            tedit = fields[cls.TEDIT_INDEX]
        elif len(fields) > cls.LAYER_INDEX:
            tedit = fields[cls.LAYER_INDEX]
        else:
            tedit = '0'

        status = _field(fields, cls.STATUS_INDEX)
        return cls(layer=layer,
                   tedit=tedit,
                   locked=status[:1] == 'F',
                   placed=status[1:2] == 'P')


# =============================================================================
# Text
# =============================================================================

REFERENCE_TAG = 'T0'
VALUE_TAG = 'T1'


@dataclass(frozen=True)
class TextRecord:
    """`Tn x y size_y size_x rot pen mirror visibility layer italic text...`"""
    tag: str
    x: float
    y: float
    size_y: float
    size_x: float
    rotation: float
    thickness: float
    visibility: str
    layer_id: str
    label: str

    LABEL_INDEX = 11

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'TextRecord':
        _require_length(fields, 7)
        label = strip_quotes(' '.join(fields[cls.LABEL_INDEX:]))
        return cls(tag=fields[0],
                   x=_number(fields, 1),
                   y=_number(fields, 2),
                   size_y=_number(fields, 3),
                   size_x=_number(fields, 4),
                   rotation=_number(fields, 5),
                   thickness=_number(fields, 6),
                   visibility=_field(fields, 8),
                   layer_id=_field(fields, 9),
                   label=label)

    @property
    def kind(self) -> str:
        if self.tag == REFERENCE_TAG:
            return 'reference'
        if self.tag == VALUE_TAG:
            return 'value'
        return 'user'

    @property
    def hidden(self) -> bool:
        return self.kind == 'user' and self.visibility == 'I'


# =============================================================================
# Drawings
# =============================================================================

@dataclass(frozen=True)
class SegmentRecord:
    """`DS x1 y1 x2 y2 width layer`; DC uses the same layout (center, point on circle)."""
    tag: str
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    layer_id: str

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'SegmentRecord':
        _require_length(fields, 7)
        return cls(tag=fields[0],
                   x1=_number(fields, 1), y1=_number(fields, 2),
                   x2=_number(fields, 3), y2=_number(fields, 4),
                   width=_number(fields, 5),
                   layer_id=fields[6])

    @property
    def y_values(self) -> Tuple[float, ...]:
        return (self.y1, self.y2)


CircleRecord = SegmentRecord


@dataclass(frozen=True)
class ArcRecord:
    """`DA x1 y1 x2 y2 angle width layer`; the angle stays in tenths of a degree."""
    x1: float
    y1: float
    x2: float
    y2: float
    angle: str
    width: float
    layer_id: str

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'ArcRecord':
        _require_length(fields, 8)
        _number(fields, 5)
        return cls(x1=_number(fields, 1), y1=_number(fields, 2),
                   x2=_number(fields, 3), y2=_number(fields, 4),
                   angle=fields[5],
                   width=_number(fields, 6),
                   layer_id=fields[7])

    @property
    def y_values(self) -> Tuple[float, ...]:
        return (self.y1, self.y2)


@dataclass(frozen=True)
class PolygonRecord:
    """`DP 0 0 0 0 point_count width layer`, followed by point_count `Dl` records."""
    count: int
    width: float
    layer_id: str

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'PolygonRecord':
        _require_length(fields, 8)
        try:
            count = int(fields[5])
        except ValueError:
            raise ModRecordError(f"bad point count {fields[5]!r}", fields[0])
        return cls(count=count, width=_number(fields, 6), layer_id=fields[7])


@dataclass(frozen=True)
class PolygonPointRecord:
    """`Dl x y`"""
    x: float
    y: float

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'PolygonPointRecord':
        _require_length(fields, 3)
        return cls(x=_number(fields, 1), y=_number(fields, 2))


# =============================================================================
# Pads
# =============================================================================

@dataclass(frozen=True)
class PadAttributes:
    """`At TYPE N MASK` inside a $PAD."""
    pad_type: str = 'STD'
    mask: str = '0'

    @classmethod
    def from_fields(cls, fields: Optional[List[str]]) -> 'PadAttributes':
        if not fields:
            return cls()
        return cls(pad_type=_field(fields, 1, 'STD').upper(),
                   mask=_field(fields, 3, '0'))


@dataclass(frozen=True)
class PadShape:
    """`Sh "name" shape width height dx dy rot`"""
    name: str = ''
    shape: str = 'C'
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0

    @classmethod
    def from_fields(cls, fields: Optional[List[str]]) -> 'PadShape':
        if not fields:
            return cls()
        return cls(name=_field(fields, 1).replace('"', ''),
                   shape=_field(fields, 2, 'C'),
                   width=_number(fields, 3, 0.0),
                   height=_number(fields, 4, 0.0),
                   rotation=_number(fields, 7, 0.0))


@dataclass(frozen=True)
class PadPosition:
    """`Po x y` inside a $PAD."""
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_fields(cls, fields: Optional[List[str]]) -> 'PadPosition':
        if not fields:
            return cls()
        return cls(x=_number(fields, 1), y=_number(fields, 2))


@dataclass(frozen=True)
class DrillRecord:
    """`Dr size x_offset y_offset [O size_x size_y]`"""
    size: float
    x_offset: float = 0.0
    y_offset: float = 0.0
    oval: bool = False
    oval_x: float = 0.0
    oval_y: float = 0.0

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'DrillRecord':
        _require_length(fields, 2)
        oval = len(fields) >= 7 and fields[4] == 'O'
        return cls(size=_number(fields, 1),
                   x_offset=_number(fields, 2, 0.0),
                   y_offset=_number(fields, 3, 0.0),
                   oval=oval,
                   oval_x=_number(fields, 5) if oval else 0.0,
                   oval_y=_number(fields, 6) if oval else 0.0)


# =============================================================================
# 3D models
# =============================================================================

def _triple(fields: Optional[List[str]], default: Tuple[str, str, str]) -> Tuple[str, str, str]:
    if not fields or len(fields) < 4:
        return default
    return (fields[1], fields[2], fields[3])


@dataclass(frozen=True)
class ModelRecord:
    """A $SHAPE3D block: `Na "file"`, `Of x y z` (inches), `Sc x y z`, `Ro x y z`."""
    name: str
    offset: Tuple[float, float, float]
    scale: Tuple[str, str, str]
    rotate: Tuple[str, str, str]

    @classmethod
    def from_node(cls, node: ModNode) -> Optional['ModelRecord']:
        """Build from the block's records; None if the block names no model."""
        na = node.first('Na')
        if na is None or len(na) < 2:
            return None
        offset = _triple(node.first('Of'), ('0', '0', '0'))
        values = [parse_number(v) for v in offset]
        if any(v is None for v in values):
            raise ModRecordError(f"bad model offset {' '.join(offset)!r}", 'Of')
        return cls(name=' '.join(na[1:]).replace('"', ''),
                   offset=tuple(values),
                   scale=_triple(node.first('Sc'), ('1', '1', '1')),
                   rotate=_triple(node.first('Ro'), ('0', '0', '0')))
