import pytest

from modpretty.legacy.mod_parser import iter_modules


R0805_LIBRARY = """\
PCBNEW-LibModule-V1  Mon 01 Jan 2024 12:00:00 PM CET
# encoding utf-8
$INDEX
R_0805
$EndINDEX
$MODULE R_0805
Po 0 0 0 15 51C5B8A8 00000000 ~~
Li R_0805
Cd Resistor 0805
Kw R SMD
Sc 0
AR
Op 0 0 0
At SMD
T0 0 -600 400 400 0 60 N V 21 N "R1"
T1 0 600 400 400 900 60 N V 21 N "10k"
DS -500 -300 500 -300 60 21
$PAD
Sh "1" R 500 600 0 0 0
Dr 0 0 0
At SMD N 00888000
Ne 0 ""
Po -400 0
$EndPAD
$PAD
Sh "2" R 500 600 0 0 0
Dr 0 0 0
At SMD N 00888000
Ne 0 ""
Po 400 0
$EndPAD
$SHAPE3D
Na "smd/resistors/R0805.wrl"
Sc 1 1 1
Of 0 0 0
Ro 0 0 0
$EndSHAPE3D
$EndMODULE R_0805
$EndLIBRARY
"""

METRIC_POLYGON_LIBRARY = """\
PCBNEW-LibModule-V1  Sun 28 Jul 2013 12:02:51 PM CEST
# encoding utf-8
Units mm
$INDEX
Polygon
$EndINDEX
$MODULE Polygon
Po 0 0 0 15 51F4CCE7 00000000 ~~
Li Polygon
DP 0 0 0 0 5 0.1 21
Dl -1 -1
Dl 1 -1
Dl 1 1
Dl -1 1
Dl -1 -1.5
$EndMODULE Polygon
$EndLIBRARY
"""


def module_from(text):
    """First module of a library snippet."""
    return next(iter_modules(text.splitlines()))


def wrap_module(*records, name='TEST'):
    """Library text holding one module with the given record lines."""
    body = '\n'.join(records)
    return f"$MODULE {name}\n{body}\n$EndMODULE {name}\n"


@pytest.fixture
def r0805_library():
    return R0805_LIBRARY


@pytest.fixture
def metric_polygon_library():
    return METRIC_POLYGON_LIBRARY
