import pytest

from modpretty.legacy.formatting import (
    UnitFormatter, format_number, parse_number, quote_text, safe_filename, strip_quotes,
)
from modpretty.legacy.units import DEFAULT_SCALE, METRIC_SCALE


class TestNumbers:

    @pytest.mark.parametrize("text, expected", [
        ("12", 12.0), ("-0.5", -0.5), ("1e2", 100.0), (" 3 ", 3.0),
        ("abc", None), ("", None), ("nan", None), ("inf", None),
    ])
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("value, expected", [
        (0.0, "0"), (-0.0, "0"), (1.0, "1"), (0.254, "0.254"),
        (0.25400000000000006, "0.254"), (-1.27, "-1.27"),
        (1.23456789, "1.234568"), (-0.0000001, "0"), (1000.5, "1000.5"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected


class TestUnitFormatter:

    @pytest.mark.parametrize("raw", ["0", "1", "100", "-250", "12345", "0.5"])
    def test_scaled_is_value_times_scale(self, raw):
        assert UnitFormatter(DEFAULT_SCALE).scaled(raw) == float(raw) * DEFAULT_SCALE
        assert UnitFormatter(METRIC_SCALE).scaled(raw) == float(raw)

    def test_num(self):
        fmt = UnitFormatter(DEFAULT_SCALE)
        assert fmt.num("100") == "0.254"
        assert fmt.num("6") == "0.01524"
        assert fmt.num("junk") == "0"
        assert fmt.num(600.0) == "1.524"

    def test_rotation_is_tenths_of_degree(self):
        fmt = UnitFormatter(DEFAULT_SCALE)
        assert fmt.at("0", "100", "900") == "0 0.254 90"
        assert fmt.at("0", "0", "-450") == "0 0 -45"
        assert fmt.at("0", "0", "1") == "0 0 0.1"
        assert fmt.at("0", "0", "1234") == "0 0 123.4"

    @pytest.mark.parametrize("tenths", ["0", "0.009", "-0.009", "0.005", "x"])
    def test_small_rotation_is_suppressed(self, tenths):
        assert UnitFormatter(METRIC_SCALE).at("1", "2", tenths) == "1 2"

    def test_rotation_rounds_to_three_decimals(self):
        assert UnitFormatter.rotation(0.12345) == " 0.012"
        assert UnitFormatter.rotation(123.4567) == " 12.346"

    def test_offset(self):
        fmt = UnitFormatter(DEFAULT_SCALE)
        assert fmt.offset("0", "0") == ""
        assert fmt.offset(0.0, 0.0) == ""
        assert fmt.offset("50", "0") == " (offset 0.127 0)"
        assert fmt.offset("0", "-100") == " (offset 0 -0.254)"


class TestText:

    def test_quote_text(self):
        assert quote_text("") == '""'
        assert quote_text("R1") == "R1"
        assert quote_text("two words") == '"two words"'
        assert quote_text("a(b)") == '"a(b)"'
        assert quote_text('say "hi" now') == '"say hi now"'
        assert quote_text('x"y') == '"xy"'
        assert quote_text("${REFERENCE}") == "${REFERENCE}"

    def test_quote_text_escapes_backslashes(self):
        assert quote_text("C:\\my models\\new.wrl") == '"C:\\\\my models\\\\new.wrl"'
        assert quote_text("dir C:\\lib\\") == '"dir C:\\\\lib\\\\"'
        assert quote_text("C:\\lib") == "C:\\lib"

    def test_strip_quotes_removes_one_pair(self):
        assert strip_quotes('"R1"') == "R1"
        assert strip_quotes('""R1""') == '"R1"'
        assert strip_quotes('"') == '"'
        assert strip_quotes('R1') == 'R1'

    def test_safe_filename(self):
        assert safe_filename("R_0805") == "R_0805"
        assert safe_filename("A/B:C*D?") == "A_B_C_D_"
        assert safe_filename('x<y>"z"|w\\v') == "x_y__z__w_v"
        assert safe_filename("") == "_"
        assert safe_filename("tab\there") == "tab_here"
