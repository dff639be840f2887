import re
import time
from datetime import datetime, timezone

import pytest

from sample_tools.errors import ToolArgumentError, ToolError
from sample_tools.tools import calculate, current_time, generate_uuid, reverse_string
from sample_tools.tools.calculator import evaluate, find_invalid_characters, format_number
from sample_tools.tools.clock import format_iso, format_readable

UUID_V4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


# --- calculate ---

@pytest.mark.parametrize(
    "expression, expected",
    [
        ("2 + 3", "2 + 3 = 5"),
        ("(10 + 5) * 2 - 3", "(10 + 5) * 2 - 3 = 27"),
        ("2 + 3 * 4", "2 + 3 * 4 = 14"),
        ("7 / 2", "7 / 2 = 3.5"),
        ("0.1 + 0.2", "0.1 + 0.2 = 0.30000000000000004"),
        ("-4 * -(2 + 1)", "-4 * -(2 + 1) = 12"),
        (".5 + 5.", ".5 + 5. = 5.5"),
        ("10 - 2 - 3", "10 - 2 - 3 = 5"),
        ("100 / 10 / 5", "100 / 10 / 5 = 2"),
        ("  42  ", "  42   = 42"),
        ("1 / 100000", "1 / 100000 = 0.00001"),
        ("1 / 10000000", "1 / 10000000 = 1e-7"),
    ],
)
def test_calculate_evaluates_expressions(expression, expected):
    assert calculate({"expression": expression}) == expected


def test_calculate_rejects_code_even_if_rest_would_evaluate():
    with pytest.raises(ToolError) as excinfo:
        calculate({"expression": "2 + 3; console.log(1)"})
    message = str(excinfo.value)
    assert message.startswith("Invalid characters in expression")
    assert "';'" in message
    assert "'c'" in message


def test_find_invalid_characters_reports_each_once_in_order():
    assert find_invalid_characters("2**x + x ^ y") == ["x", "^", "y"]
    assert find_invalid_characters("1 + (2.5 * 3) / 4 - 5") == []


@pytest.mark.parametrize("expression", ["2 +", "(1 + 2", "1 + 2)", "()", "1..2", ".", "2 ** 3", "   "])
def test_calculate_rejects_malformed_expressions(expression):
    with pytest.raises(ToolError, match="Invalid mathematical expression"):
        calculate({"expression": expression})


def test_calculate_rejects_division_by_zero():
    with pytest.raises(ToolError, match="Division by zero"):
        calculate({"expression": "1 / (2 - 2)"})


@pytest.mark.parametrize("arguments", [{}, {"expression": ""}, {"expression": 12}, {"expression": None}])
def test_calculate_requires_string_expression(arguments):
    with pytest.raises(ToolArgumentError, match="Expression is required and must be a string"):
        calculate(arguments)


def test_evaluate_operator_precedence_and_unary():
    assert evaluate("2 + 3 * 4") == 14
    assert evaluate("(2 + 3) * 4") == 20
    assert evaluate("--3") == 3
    assert evaluate("+3") == 3


def test_format_number_matches_javascript_rendering():
    assert format_number(5.0) == "5"
    assert format_number(-0.0) == "0"
    assert format_number(3.5) == "3.5"
    assert format_number(-27.0) == "-27"


@pytest.mark.parametrize(
    "value, expected",
    [
        (1e-05, "0.00001"),
        (1e-06, "0.000001"),
        (1e-07, "1e-7"),
        (-2.5e-08, "-2.5e-8"),
        (1.5e22, "1.5e+22"),
        (1e21, "1e+21"),
        (123456.789, "123456.789"),
    ],
)
def test_format_number_uses_javascript_exponent_thresholds(value, expected):
    assert format_number(value) == expected


# --- generate_uuid ---

def test_generate_uuid_default_is_v4():
    assert UUID_V4_RE.match(generate_uuid({}))


def test_generate_uuid_version_four_explicit():
    assert UUID_V4_RE.match(generate_uuid({"version": 4}))
    assert UUID_V4_RE.match(generate_uuid({"version": 4.0}))


def test_generate_uuid_successive_values_differ():
    assert generate_uuid({}) != generate_uuid({})


@pytest.mark.parametrize("version", [1, 3, 5, "4", True, None])
def test_generate_uuid_rejects_other_versions(version):
    with pytest.raises(ToolArgumentError, match="Only UUID version 4 is supported"):
        generate_uuid({"version": version})


# --- reverse_string ---

def test_reverse_string():
    assert reverse_string({"text": "hello world"}) == "dlrow olleh"


@pytest.mark.parametrize("text", ["", "a", "racecar", "héllo wörld", "日本語テキスト", "line1\nline2"])
def test_reverse_string_is_an_involution(text):
    once = reverse_string({"text": text})
    assert reverse_string({"text": once}) == text


@pytest.mark.parametrize("arguments", [{}, {"text": None}, {"text": 5}, {"text": ["a"]}])
def test_reverse_string_requires_text(arguments):
    with pytest.raises(ToolArgumentError, match="Text is required and must be a string"):
        reverse_string(arguments)


# --- current_time ---

def test_current_time_unix_is_close_to_wall_clock():
    before = time.time()
    value = current_time({"format": "unix"})
    assert value.isdigit()
    assert abs(int(value) - before) <= 2


def test_current_time_default_is_iso():
    value = current_time({})
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", value)


def test_current_time_readable_shape():
    value = current_time({"format": "readable"})
    assert re.match(r"^\d{1,2}/\d{1,2}/\d{4}, \d{1,2}:\d{2}:\d{2} (AM|PM)$", value)


def test_current_time_rejects_unknown_format():
    with pytest.raises(ToolError) as excinfo:
        current_time({"format": "bogus"})
    message = str(excinfo.value)
    assert "bogus" in message
    for fmt in ("iso", "unix", "readable"):
        assert fmt in message


def test_format_iso_uses_utc_milliseconds():
    now = datetime(2026, 2, 3, 4, 5, 6, 789123, tzinfo=timezone.utc)
    assert format_iso(now) == "2026-02-03T04:05:06.789Z"


def test_format_readable_twelve_hour_clock():
    local = datetime(2026, 10, 18, 0, 4, 5).astimezone()
    assert format_readable(local) == "10/18/2026, 12:04:05 AM"
    afternoon = datetime(2026, 10, 18, 19, 4, 5).astimezone()
    assert format_readable(afternoon) == "10/18/2026, 7:04:05 PM"
