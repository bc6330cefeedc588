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
Footprint Emitter

Writes one .kicad_mod footprint from a finished $MODULE node.

Sections are emitted in a fixed order: header, metadata, texts, drawings,
pads and 3D models, and finally the ${REFERENCE} placeholder on F.Fab
that current KiCad libraries expect. Records that cannot be interpreted
are logged and left out; a footprint is always produced.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Callable, Any

from .formatting import UnitFormatter, format_number, quote_text, safe_filename, strip_quotes
from .mod_parser import ModNode, MODULE_TAG, TEXT_KEY, DRAWING_KEY
from .records import (
    ModRecordError, PlacementRecord, TextRecord, SegmentRecord, CircleRecord,
    ArcRecord, PolygonRecord, PolygonPointRecord, PadAttributes, PadShape,
    PadPosition, DrillRecord, ModelRecord,
)
from .units import (
    DEFAULT_SCALE, INCH_TO_MM, ALL_LAYERS_MASK, THROUGH_HOLE_MASK,
    layer_name, layers_from_mask,
)


logger = logging.getLogger(__name__)


DEFAULT_NAME = 'Unknown'
FOOTPRINT_SUFFIX = '.kicad_mod'

FAB_LAYER = 'F.Fab'
REFERENCE_PLACEHOLDER = '${REFERENCE}'
REFERENCE_MARGIN = 1.0
PLACEHOLDER_FONT = '(effects (font (size 0.4 0.4) (thickness 0.1)))'

DEFAULT_TEXT_LABELS = {'reference': 'Ref**', 'value': 'Val**'}

PAD_TAG = '$PAD'
MODEL_TAG = '$SHAPE3D'

POLYGON_POINTS_PER_LINE = 4

# legacy At type -> (kicad pad kind, mask filter, all copper layers)
PAD_TYPES = {
    'STD': ('thru_hole', THROUGH_HOLE_MASK, True),
    'HOLE': ('np_thru_hole', THROUGH_HOLE_MASK, True),
    'SMD': ('smd', ALL_LAYERS_MASK, False),
    'CONN': ('connect', ALL_LAYERS_MASK, False),
}

# Module `At` attribute values that map to no (attr ...) clause
IGNORED_ATTRIBUTES = {'normal'}


@dataclass
class EmittedFootprint:
    """One converted footprint and the file name it should be stored under."""
    name: str
    filename: str
    content: str
    line: int = 0


@dataclass
class _OpenPolygon:
    header: PolygonRecord
    points: List[PolygonPointRecord] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return self.header.count - len(self.points)


def module_name(module: ModNode) -> str:
    """Name declared on the `$MODULE name` header line."""
    header = module.first(MODULE_TAG)
    if not header or len(header) < 2:
        return DEFAULT_NAME
    return strip_quotes(' '.join(header[1:])) or DEFAULT_NAME


class FootprintEmitter:
    """Converts one module subtree to .kicad_mod text."""

    def __init__(self, scale: float = DEFAULT_SCALE):
        self.scale = scale
        self.fmt = UnitFormatter(scale)
        self.lines: List[str] = []
        self.name = DEFAULT_NAME
        self.y_max = 0.0

    def emit(self, module: ModNode) -> EmittedFootprint:
        """
        Convert a finished $MODULE node.

        Args:
            module: Module node as returned by the tree builder

        Returns:
            EmittedFootprint holding the footprint text and its file name
        """
        self.lines = []
        self.y_max = 0.0
        self.name = module_name(module)
        logger.info(f"[{module.line:5}] module: {self.name}")

        self._emit_header(module)
        self._emit_metadata(module)
        self._emit_texts(module.get(TEXT_KEY))
        self._emit_drawings(module.get(DRAWING_KEY))

        for child in module.children:
            try:
                if child.tag == PAD_TAG:
                    self._emit_pad(child)
                elif child.tag == MODEL_TAG:
                    self._emit_model(child)
            except (ModRecordError, IndexError, ValueError) as e:
                logger.debug(f"{self.name}: skipped {child.tag} at line {child.line}: {e}")

        self._emit_reference_placeholder()
        self.lines.append(')')

        return EmittedFootprint(name=self.name,
                                filename=safe_filename(self.name) + FOOTPRINT_SUFFIX,
                                content='\n'.join(self.lines) + '\n',
                                line=module.line)

    # Helpers

    def _decode(self, factory: Callable[[List[str]], Any], fields: List[str]) -> Optional[Any]:
        """Build a typed record, or log and return None if it is malformed."""
        try:
            return factory(fields)
        except ModRecordError as e:
            logger.debug(f"{self.name}: skipped record {' '.join(fields)!r}: {e}")
            return None

    def _track_y(self, *values: float):
        for value in values:
            if value > self.y_max:
                self.y_max = value

    # Sections

    def _emit_header(self, module: ModNode):
        placement = PlacementRecord.from_fields(module.first('Po'))
        flags = ''
        if placement.locked:
            flags += 'locked '
        if placement.placed:
            flags += 'placed '
        self.lines.append(f"(module {quote_text(self.name)} {flags}(layer {placement.layer}) (tedit {placement.tedit})")

    def _emit_metadata(self, module: ModNode):
        descr = module.first('Cd')
        if descr:
            text = ' '.join(descr[1:])
            if text:
                self.lines.append(f"  (descr {quote_text(text)})")

        keywords = module.first('Kw')
        if keywords:
            text = ' '.join(keywords[1:])
            if text:
                self.lines.append(f"  (tags {quote_text(text)})")

        attributes = module.first('At')
        if attributes and len(attributes) > 1:
            attr = attributes[1].lower()
            if attr not in IGNORED_ATTRIBUTES:
                self.lines.append(f"  (attr {quote_text(attr)})")

    def _emit_texts(self, records: List[List[str]]):
        for fields in records:
            text = self._decode(TextRecord.from_fields, fields)
            if text is None:
                continue

            kind = text.kind
            label = text.label or DEFAULT_TEXT_LABELS.get(kind, '')
            # KiCad 9 libraries keep the value on the fabrication layer
            layer = FAB_LAYER if kind == 'value' else layer_name(text.layer_id)
            hide = ' hide' if text.hidden else ''

            self.lines.append(f"  (fp_text {kind} {quote_text(label)} (at {self.fmt.at(text.x, text.y, text.rotation)}) (layer {layer}){hide}")
            self.lines.append(f"    (effects (font (size {self.fmt.num(text.size_y)} {self.fmt.num(text.size_x)})"
                              f" (thickness {self.fmt.num(text.thickness)})))")
            self.lines.append("  )")
            self._track_y(text.y)

    def _emit_drawings(self, records: List[List[str]]):
        polygon: Optional[_OpenPolygon] = None

        for fields in records:
            tag = fields[0]

            if tag == 'DS':
                seg = self._decode(SegmentRecord.from_fields, fields)
                if seg:
                    self.lines.append(f"  (fp_line (start {self.fmt.xy(seg.x1, seg.y1)}) (end {self.fmt.xy(seg.x2, seg.y2)})"
                                      f" (layer {layer_name(seg.layer_id)}) (width {self.fmt.num(seg.width)}))")
                    self._track_y(*seg.y_values)

            elif tag == 'DC':
                circle = self._decode(CircleRecord.from_fields, fields)
                if circle:
                    self.lines.append(f"  (fp_circle (center {self.fmt.xy(circle.x1, circle.y1)}) (end {self.fmt.xy(circle.x2, circle.y2)})"
                                      f" (layer {layer_name(circle.layer_id)}) (width {self.fmt.num(circle.width)}))")
                    self._track_y(*circle.y_values)

            elif tag == 'DA':
                arc = self._decode(ArcRecord.from_fields, fields)
                if arc:
                    self.lines.append(f"  (fp_arc (start {self.fmt.xy(arc.x1, arc.y1)}) (end {self.fmt.xy(arc.x2, arc.y2)})"
                                      f" (angle {arc.angle}) (layer {layer_name(arc.layer_id)}) (width {self.fmt.num(arc.width)}))")
                    self._track_y(*arc.y_values)

            elif tag == 'DP':
                header = self._decode(PolygonRecord.from_fields, fields)
                if polygon is not None:
                    self._close_polygon(polygon, forced=True)
                    polygon = None
                if header is None:
                    continue
                polygon = _OpenPolygon(header)
                if polygon.remaining <= 0:
                    self._close_polygon(polygon)
                    polygon = None

            elif tag == 'Dl':
                if polygon is None:
                    continue
                point = self._decode(PolygonPointRecord.from_fields, fields)
                if point is None:
                    continue
                polygon.points.append(point)
                self._track_y(point.y)
                if polygon.remaining == 0:
                    self._close_polygon(polygon)
                    polygon = None

        if polygon is not None:
            self._close_polygon(polygon, forced=True)

    def _close_polygon(self, polygon: _OpenPolygon, forced: bool = False):
        if forced:
            logger.warning(f"{self.name}: polygon declared {polygon.header.count} points but got "
                           f"{len(polygon.points)}, closing it early")
        if not polygon.points:
            return

        coords = [f"(xy {self.fmt.xy(p.x, p.y)})" for p in polygon.points]
        rows = [' '.join(coords[i:i + POLYGON_POINTS_PER_LINE])
                for i in range(0, len(coords), POLYGON_POINTS_PER_LINE)]
        self.lines.append(f"  (fp_poly (pts {rows[0]}")
        for row in rows[1:]:
            self.lines.append(f"    {row}")
        self.lines[-1] += ')'
        self.lines.append(f"    (layer {layer_name(polygon.header.layer_id)}) (width {self.fmt.num(polygon.header.width)})")
        self.lines.append("  )")

    def _emit_pad(self, pad: ModNode):
        attributes = PadAttributes.from_fields(pad.first('At'))
        shape = PadShape.from_fields(pad.first('Sh'))
        position = PadPosition.from_fields(pad.first('Po'))

        kind, test_mask, all_copper = PAD_TYPES.get(attributes.pad_type, PAD_TYPES['STD'])
        layers = layers_from_mask(attributes.mask, test_mask)
        if all_copper:
            layers.insert(0, '*.Cu')

        size = f"(size {self.fmt.xy(shape.width, shape.height)})"
        if shape.shape == 'R':
            shape_clause = f"rect (at {self.fmt.at(position.x, position.y, shape.rotation)}) {size}"
        elif shape.shape == 'O':
            shape_clause = f"oval (at {self.fmt.at(position.x, position.y, shape.rotation)}) {size}"
        elif shape.shape == 'C':
            shape_clause = f"circle (at {self.fmt.xy(position.x, position.y)}) {size}"
        else:
            logger.debug(f"{self.name}: pad {shape.name!r} has unsupported shape {shape.shape!r}")
            shape_clause = ''

        parts = [quote_text(shape.name), kind]
        if shape_clause:
            parts.append(shape_clause)
        parts.extend(self._drill_clauses(pad))
        parts.append(f"(layers {' '.join(layers)})")

        self.lines.append(f"  (pad {' '.join(parts)})")
        self._track_y(position.y)

    def _drill_clauses(self, pad: ModNode) -> List[str]:
        clauses = []
        for fields in pad.get(DRAWING_KEY):
            if fields[0] != 'Dr':
                continue
            drill = self._decode(DrillRecord.from_fields, fields)
            if drill is None or drill.size == 0:
                continue
            offset = self.fmt.offset(drill.x_offset, drill.y_offset)
            if drill.oval:
                clauses.append(f"(drill oval {self.fmt.xy(drill.oval_x, drill.oval_y)}{offset})")
            else:
                clauses.append(f"(drill {self.fmt.num(drill.size)}{offset})")
        return clauses

    def _emit_model(self, block: ModNode):
        model = ModelRecord.from_node(block)
        if model is None:
            logger.debug(f"{self.name}: {MODEL_TAG} at line {block.line} has no model name")
            return

        # Of is always in inches, whatever the library units
        offset = ' '.join(format_number(v * INCH_TO_MM) for v in model.offset)
        self.lines.append(f"  (model {quote_text(model.name)}")
        self.lines.append(f"    (offset (xyz {offset}))")
        self.lines.append(f"    (scale (xyz {' '.join(model.scale)}))")
        self.lines.append(f"    (rotate (xyz {' '.join(model.rotate)}))")
        self.lines.append("  )")

    def _emit_reference_placeholder(self):
        text_y = self.y_max * self.scale + REFERENCE_MARGIN
        self.lines.append(f"  (fp_text user \"{REFERENCE_PLACEHOLDER}\" (at 0 {format_number(text_y)}) (layer {FAB_LAYER})")
        self.lines.append(f"    {PLACEHOLDER_FONT}")
        self.lines.append("  )")


def emit_footprint(module: ModNode, scale: float = DEFAULT_SCALE) -> EmittedFootprint:
    """Convert one module node with the given mm-per-unit scale."""
    return FootprintEmitter(scale).emit(module)
