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
Main conversion interface for legacy .mod libraries.

Provides:
- in-memory conversion of library text to footprints
- .mod file -> <library>.pretty directory
- directory of .mod files -> one .pretty directory per library
- the `modpretty` command-line tool
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Iterable, Optional, Union

from ..common.sexp_helpers import check_footprint
from .footprint_emitter import EmittedFootprint, FootprintEmitter
from .mod_parser import iter_modules
from .units import DEFAULT_SCALE, resolve_scale


logger = logging.getLogger(__name__)


# Legacy libraries were written with the Windows Western codepage
DEFAULT_ENCODING = os.environ.get('MODPRETTY_ENCODING', 'cp1252')
MOD_SUFFIX = '.mod'
PRETTY_SUFFIX = '.pretty'

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def configure_logging(level: int = logging.INFO):
    """Console-only logging to stderr, as expected from a CLI tool."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True
    )


@dataclass
class ConversionReport:
    """Outcome of converting a directory of libraries."""
    files: List[Path] = field(default_factory=list)
    footprints: List[Path] = field(default_factory=list)
    failed_files: List[Path] = field(default_factory=list)
    check_failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.files) and not self.failed_files and not self.check_failures


class ModConverter:
    """
    Converts legacy footprint libraries to KiCad .pretty libraries.

    The unit scale is file-scoped: it starts at decimils for every library
    and switches to millimetres once a `Units mm` declaration is seen.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING, check: bool = False):
        self.encoding = encoding
        self.check = check
        self.check_failures: List[str] = []

    def convert_lines(self, lines: Iterable[str]) -> List[EmittedFootprint]:
        """
        Convert the lines of one library.

        Args:
            lines: Decoded text lines of a .mod file

        Returns:
            Emitted footprints in document order
        """
        scale = DEFAULT_SCALE
        footprints = []
        for module in iter_modules(lines):
            scale = resolve_scale(module, scale)
            footprint = FootprintEmitter(scale).emit(module)
            if self.check:
                self._check(footprint)
            footprints.append(footprint)
        return footprints

    def convert_text(self, content: str) -> List[EmittedFootprint]:
        return self.convert_lines(content.splitlines())

    def convert_file(self, mod_path: Union[str, Path],
                     pretty_dir: Optional[Union[str, Path]] = None) -> List[Path]:
        """
        Convert a .mod file into a .pretty directory.

        Args:
            mod_path: Path to the legacy library
            pretty_dir: Output directory; defaults to <stem>.pretty next to the input

        Returns:
            Paths of the written .kicad_mod files

        Raises:
            OSError: If the library cannot be read or the output written
        """
        mod_path = Path(mod_path)
        pretty_dir = Path(pretty_dir) if pretty_dir else mod_path.with_suffix(PRETTY_SUFFIX)
        pretty_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Processing file: {mod_path.name}")
        written = []
        with open(mod_path, 'r', encoding=self.encoding, errors='replace', newline='') as f:
            for footprint in self.convert_lines(f):
                target = pretty_dir / footprint.filename
                with open(target, 'w', encoding='utf-8', newline='\n') as out:
                    out.write(footprint.content)
                written.append(target)

        logger.info(f"Saved library in: {pretty_dir}")
        return written

    def convert_directory(self, mod_dir: Union[str, Path],
                          output_dir: Optional[Union[str, Path]] = None) -> ConversionReport:
        """
        Convert every .mod file in `mod_dir` (not recursive).

        A library that cannot be read or written is logged and skipped.
        With `output_dir`, each library goes to <output_dir>/<stem>.pretty.
        """
        mod_dir = Path(mod_dir)
        report = ConversionReport()
        self.check_failures = report.check_failures

        mod_files = sorted(p for p in mod_dir.iterdir()
                           if p.is_file() and p.suffix.lower() == MOD_SUFFIX)
        if not mod_files:
            logger.warning(f"No {MOD_SUFFIX} files in {mod_dir}")
            return report

        for mod_file in mod_files:
            report.files.append(mod_file)
            pretty_dir = Path(output_dir) / (mod_file.stem + PRETTY_SUFFIX) if output_dir else None
            try:
                report.footprints.extend(self.convert_file(mod_file, pretty_dir))
            except OSError as e:
                logger.error(f"Skipping {mod_file.name}: {e}")
                report.failed_files.append(mod_file)
        return report

    def _check(self, footprint: EmittedFootprint):
        for problem in check_footprint(footprint.content, footprint.name):
            message = f"{footprint.filename}: {problem}"
            logger.error(f"Check failed for {message}")
            self.check_failures.append(message)


# =============================================================================
# Command-line interface
# =============================================================================

def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog='modpretty',
        description="Convert legacy KiCad footprint libraries (.mod) to .pretty directories"
    )
    parser.add_argument(
        "mod_dir",
        nargs="?",
        default=os.getcwd(),
        help="Directory containing .mod files (default: current directory)"
    )
    parser.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=os.environ.get('MODPRETTY_OUTPUT_DIR') or None,
        help="Write <library>.pretty directories here instead of next to each .mod file"
    )
    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help=f"Text encoding of the .mod files (default: {DEFAULT_ENCODING})"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Parse every written footprint back and report malformed output"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Also log skipped records")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    mod_dir = Path(args.mod_dir.strip().strip('"'))
    if not mod_dir.is_dir():
        logger.error(f"Directory does not exist: '{mod_dir}'")
        return 1

    converter = ModConverter(encoding=args.encoding, check=args.check)
    report = converter.convert_directory(mod_dir, args.output_dir)

    logger.info(f"Done: {len(report.footprints)} footprints from {len(report.files)} libraries")
    if report.failed_files:
        logger.error(f"{len(report.failed_files)} libraries could not be converted")
    if report.check_failures:
        logger.error(f"{len(report.check_failures)} footprints failed the output check")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
