import pytest

from gcontinuity.fingerprint import (
    device_row_subtitle,
    format_fingerprint_two_lines,
    status_css_class,
    truncate_fingerprint,
)


def test_truncate_long_fingerprint():
    assert truncate_fingerprint("13:79:75:AB:CD:EF") == "13:79:75:…"


@pytest.mark.parametrize("fp", ["", "AB", "AB:CD", "nocolons"])
def test_truncate_short_fingerprint_unchanged(fp):
    assert truncate_fingerprint(fp) == fp


def test_truncate_keeps_prefix_of_original():
    fp = "0A:1B:2C:3D:4E:5F:60:71"
    short = truncate_fingerprint(fp)
    assert short.endswith(":…")
    assert fp.startswith(short[: -len(":…")])
    assert short.count(":") == 3


def test_truncate_exactly_three_groups_gets_ellipsis():
    fp = "AA:BB:CC"
    assert truncate_fingerprint(fp) == fp + ":…"


def test_device_row_subtitle_parts():
    fp = "13:79:75:AB:CD"
    subtitle = device_row_subtitle(fp, "Just now")
    assert subtitle.startswith(truncate_fingerprint(fp))
    assert subtitle.endswith("Just now")
    assert "  ·  " in subtitle


def test_device_row_subtitle_short_fingerprint():
    subtitle = device_row_subtitle("", "Just now")
    head, tail = subtitle.split("  ·  ")
    assert head == ""
    assert tail == "Just now"


@pytest.mark.parametrize(
    "status, css",
    [
        ("Connected", "success"),
        ("Reconnecting", "warning"),
        ("Disconnected", "dim-label"),
        ("", "dim-label"),
        ("connected", "dim-label"),
    ],
)
def test_status_css_class(status, css):
    assert status_css_class(status) == css


def test_two_lines_odd_count():
    assert format_fingerprint_two_lines("AA:BB:CC") == "AA:BB\nCC"


@pytest.mark.parametrize("fp", ["", "AA", "nocolon"])
def test_two_lines_single_group_unchanged(fp):
    assert format_fingerprint_two_lines(fp) == fp


@pytest.mark.parametrize(
    "fp",
    [
        "AA:BB",
        "AA:BB:CC:DD",
        "13:79:75:AB:CD",
        ":".join(f"{n:02X}" for n in range(32)),
    ],
)
def test_two_lines_invariants(fp):
    out = format_fingerprint_two_lines(fp)
    lines = out.split("\n")
    assert len(lines) == 2
    assert out.replace("\n", ":") == fp
    first, second = (line.split(":") for line in lines)
    assert 0 <= len(first) - len(second) <= 1