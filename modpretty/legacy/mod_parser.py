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
Legacy Footprint Library Parser

Tolerant line-by-line reader for PCBNEW-LibModule-V1 (.mod) libraries.
Rebuilds the $BLOCK/$EndBLOCK nesting into a tree of ModNode objects and
hands back each $MODULE subtree as soon as its $EndMODULE marker is read.

No grammar is enforced: unbalanced closers are ignored and a module end
always returns the builder to the root.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Iterable, Iterator


logger = logging.getLogger(__name__)


# =============================================================================
# Tokenizer
# =============================================================================

_FIELD_SEPARATOR = re.compile(r'[ \t]+')


def tokenize_line(line: str) -> List[str]:
    """Split a raw line into fields on runs of spaces/tabs, dropping empties."""
    return [item for item in _FIELD_SEPARATOR.split(line.strip('\r\n')) if item]


# =============================================================================
# Record classification
# =============================================================================

BLOCK_SENTINEL = '$'
BLOCK_END = '$End'
MODULE_TAG = '$MODULE'
MODULE_END = '$EndMODULE'

TEXT_KEY = 'T'
DRAWING_KEY = 'D'

# Line kinds
MODULE_CLOSE = 'module_close'
BLOCK_CLOSE = 'block_close'
BLOCK_OPEN = 'block_open'
DATA = 'data'


def classify_line(tag: str) -> str:
    """Classify a line by its first field, in builder priority order."""
    if tag.startswith(MODULE_END):
        return MODULE_CLOSE
    if tag.startswith(BLOCK_END):
        return BLOCK_CLOSE
    if tag.startswith(BLOCK_SENTINEL):
        return BLOCK_OPEN
    return DATA


def aggregation_key(tag: str) -> str:
    """
    Map a data record tag to the key it is stored under.

    All text variants (T0, T1, T2, ...) share one key and all drawing
    variants (DS, DC, DA, DP, Dl, and the pad drill Dr) share another, so
    that their relative order is kept. The concrete tag stays at field 0.
    """
    if tag.startswith(TEXT_KEY):
        return TEXT_KEY
    if tag.startswith(DRAWING_KEY):
        return DRAWING_KEY
    return tag


# =============================================================================
# Block tree
# =============================================================================

ROOT_TAG = 'root'


@dataclass
class ModNode:
    """One block of the legacy file; the root node has no parent."""
    tag: str
    parent: Optional['ModNode'] = field(default=None, repr=False, compare=False)
    children: List['ModNode'] = field(default_factory=list)
    records: Dict[str, List[List[str]]] = field(default_factory=dict)
    line: int = 0

    def add_record(self, key: str, fields: List[str]):
        if not fields:
            return
        self.records.setdefault(key, []).append(fields)

    def get(self, key: str) -> List[List[str]]:
        return self.records.get(key, [])

    def first(self, key: str) -> Optional[List[str]]:
        entries = self.records.get(key)
        return entries[0] if entries else None

    def find_ancestor(self, tag: str) -> Optional['ModNode']:
        """Return the nearest node with `tag`, starting at this node."""
        node = self
        while node is not None:
            if node.tag == tag:
                return node
            node = node.parent
        return None

    def __repr__(self):
        return f"ModNode({self.tag!r}, line={self.line}, children={len(self.children)}, keys={list(self.records)})"


class ModTreeBuilder:
    """
    Nesting state machine over the tokenized line stream.

    The cursor is the node new records and blocks are attached to. feed()
    returns the finished $MODULE node whenever a module-end marker arrives.
    """

    def __init__(self):
        self.root = ModNode(ROOT_TAG)
        self.cursor = self.root
        self.line = 0

    def feed(self, fields: List[str]) -> Optional[ModNode]:
        self.line += 1
        if not fields:
            return None

        tag = fields[0]
        kind = classify_line(tag)

        if kind == MODULE_CLOSE:
            return self._close_module()

        if kind == BLOCK_CLOSE:
            if self.cursor.parent is not None:
                self.cursor = self.cursor.parent
            return None

        if kind == BLOCK_OPEN:
            node = ModNode(tag, parent=self.cursor, line=self.line)
            self.cursor.children.append(node)
            self.cursor = node
            # keep the header so the block's declared name can be recovered
            node.add_record(tag, fields)
            return None

        self.cursor.add_record(aggregation_key(tag), fields)
        return None

    def feed_line(self, line: str) -> Optional[ModNode]:
        return self.feed(tokenize_line(line))

    def _close_module(self) -> Optional[ModNode]:
        module = self.cursor.find_ancestor(MODULE_TAG)
        if module is None and self.cursor is not self.root:
            module = self.cursor
        if self.cursor is not module and module is not None:
            logger.debug(f"Line {self.line}: {MODULE_END} closes {self.cursor.tag} block left open")

        self.cursor = self.root
        self.root.children.clear()
        if module is None:
            logger.debug(f"Line {self.line}: {MODULE_END} without an open module, ignored")
        return module

    def pending_module(self) -> Optional[ModNode]:
        """The module still open at the cursor, if any."""
        return self.cursor.find_ancestor(MODULE_TAG)


def iter_modules(lines: Iterable[str]) -> Iterator[ModNode]:
    """
    Yield each completed $MODULE node of a legacy library in document order.

    The root keeps file-level records (for example `Units mm`) across
    modules, so module.parent can still be consulted after the yield.
    """
    builder = ModTreeBuilder()
    for line in lines:
        module = builder.feed_line(line)
        if module is not None:
            yield module

    pending = builder.pending_module()
    if pending is not None:
        logger.warning(f"Module opened at line {pending.line} has no {MODULE_END}, skipped")
