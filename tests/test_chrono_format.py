from fractions import Fraction

import pytest

from rapidlog.chrono_format import (
    ChronoFormatChecker,
    DurationFormatter,
    NumericSystem,
    check_chrono_format,
    format_duration,
    parse_chrono_format,
    unit_suffix,
)

MS = Fraction(1, 1000)


class Recorder:
    def __init__(self):
        self.texts = []
        self.hours = []

    def on_text(self, text):
        self.texts.append(text)

    def on_24_hour(self, ns):
        self.hours.append(ns)


@pytest.mark.parametrize(
    "period, unit",
    [
        (Fraction(1, 1000), "ms"),
        (Fraction(1, 10**6), "µs"),
        (Fraction(1, 10**9), "ns"),
        (Fraction(1), "s"),
        (60, "m"),
        (3600, "h"),
    ],
)
def test_unit_suffix(period, unit):
    assert unit_suffix(period) == unit


def test_unit_suffix_unknown():
    assert unit_suffix(7) is None


def test_default_format_with_unit():
    assert format_duration(42, MS) == "42" + unit_suffix(MS)


def test_default_format_without_unit():
    assert format_duration(5, 7) == "5[7]s"
    assert format_duration(5, Fraction(3, 7)) == "5[3/7]s"


@pytest.mark.parametrize("spec", ["%q", "%", "%E", "%Ez", "%O", "%Oq"])
def test_invalid_format(spec):
    with pytest.raises(ValueError, match="invalid format"):
        check_chrono_format(spec)


@pytest.mark.parametrize(
    "spec",
    ["%a", "%A", "%b", "%B", "%c", "%x", "%X", "%D", "%F", "%z", "%Z", "%w", "%u", "%Ec", "%Ow"],
)
def test_checker_rejects_dates(spec):
    with pytest.raises(ValueError, match="no date"):
        check_chrono_format(spec)


def test_format_duration_rejects_dates():
    with pytest.raises(ValueError, match="no date"):
        format_duration(1, 1, "%a")


def test_checker_accepts_time_specifiers():
    spec = "%H:%M:%S %I %p %r %R %T"
    assert check_chrono_format(spec) == len(spec)


def test_parse_stops_at_brace():
    recorder = Recorder()
    spec = "a%Hb}c"
    assert parse_chrono_format(spec, recorder) == spec.index("}")
    assert recorder.texts == ["a", "b"]
    assert recorder.hours == [NumericSystem.STANDARD]


def test_parse_alternative_numeric_system():
    recorder = Recorder()
    parse_chrono_format("%OH", recorder)
    assert recorder.hours == [NumericSystem.ALTERNATIVE]


def test_checker_is_usable_as_handler():
    assert parse_chrono_format("%M}", ChronoFormatChecker()) == 2


@pytest.mark.parametrize("total", [0, 59, 3723, 86399])
def test_hms_round_trip(total):
    out = format_duration(total, 1, "%H:%M:%S")
    parts = out.split(":")
    assert all(len(part) == 2 for part in parts)
    hours, minutes, seconds = map(int, parts)
    assert hours * 3600 + minutes * 60 + seconds == total


@pytest.mark.parametrize("total", [0, 3723, 50000])
def test_hours_wrap_at_day(total):
    assert format_duration(total + 86400, 1, "%H:%M:%S") == format_duration(total, 1, "%H:%M:%S")


def test_iso_and_24_hour_time_match_components():
    assert format_duration(3723, 1, "%T") == format_duration(3723, 1, "%H:%M:%S")
    assert format_duration(3723, 1, "%R") == format_duration(3723, 1, "%H:%M")


def test_twelve_hour_clock():
    assert format_duration(0, 1, "%I") == format_duration(12 * 3600, 1, "%I")
    assert int(format_duration(0, 1, "%I")) == 12
    for hour in range(1, 12):
        assert int(format_duration(hour * 3600, 1, "%I")) == hour
        assert format_duration((hour + 12) * 3600, 1, "%I") == format_duration(hour * 3600, 1, "%I")


def test_seconds_with_milliseconds():
    whole, frac = format_duration(61500, MS, "%S").split(".")
    expected_seconds, expected_ms = divmod(61500, 1000)
    assert int(whole) == expected_seconds % 60
    assert int(frac) == expected_ms
    assert len(frac) == 3


def test_seconds_without_milliseconds_has_no_dot():
    assert "." not in format_duration(2000, MS, "%S")


def test_escapes():
    assert format_duration(1, 1, "%%|%n|%t") == "%|\n|\t"


def test_am_pm():
    assert format_duration(13 * 3600, 1, "%p") == "PM"
    assert format_duration(0, 1, "%p") == "AM"


def test_12_hour_time_matches_components():
    total = 13 * 3600 + 5
    assert format_duration(total, 1, "%r") == format_duration(total, 1, "%I:%M:%S %p")


def test_alternative_matches_standard():
    assert format_duration(3723, 1, "%OH:%OM:%OS") == format_duration(3723, 1, "%H:%M:%S")


def test_alignment_right():
    out = format_duration(5, 1, ">6")
    assert len(out) == 6
    assert out.lstrip() == format_duration(5, 1)


def test_alignment_center_with_fill():
    out = format_duration(5, 1, "*^6")
    assert len(out) == 6
    assert out.strip("*") == format_duration(5, 1)


def test_alignment_default_left():
    out = format_duration(5, 1, "6")
    assert out.endswith(" ")
    assert out.rstrip() == format_duration(5, 1)


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        format_duration(-5, 1, "%S")


def test_duration_formatter_ignores_dates():
    formatter = DurationFormatter(3661, 0)
    end = parse_chrono_format("%a%H", formatter)
    assert end == 4
    assert formatter.result() == format_duration(3661, 1, "%H")