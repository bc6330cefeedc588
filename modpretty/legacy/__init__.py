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
Legacy footprint library parsing and conversion.

This module contains the .mod parser, the .kicad_mod emitter and the
conversion driver.
"""

from .converter import ModConverter, ConversionReport, main
from .footprint_emitter import EmittedFootprint, FootprintEmitter, emit_footprint
from .mod_parser import ModNode, ModTreeBuilder, iter_modules, tokenize_line
from .records import ModRecordError

__all__ = [
    'ModConverter', 'ConversionReport', 'main',
    'EmittedFootprint', 'FootprintEmitter', 'emit_footprint',
    'ModNode', 'ModTreeBuilder', 'iter_modules', 'tokenize_line',
    'ModRecordError',
]
