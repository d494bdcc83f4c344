"""Display helpers for device fingerprints and device-row status."""

from typing import Dict

_STATUS_CLASSES: Dict[str, str] = {
    "Connected": "success",
    "Reconnecting": "warning",
}
_DEFAULT_STATUS_CLASS = "dim-label"


def truncate_fingerprint(fp: str) -> str:
    """Shorten a colon-separated fingerprint to its first three groups plus an ellipsis.

    Fingerprints with fewer than three groups are returned unchanged.
    """
    parts = fp.split(":")[:3]
    if len(parts) == 3:
        return ":".join(parts) + ":…"
    return fp


def device_row_subtitle(fingerprint: str, last_connected: str) -> str:
    """Subtitle of a device row: the short fingerprint and when it was last seen."""
    return f"{truncate_fingerprint(fingerprint)}  ·  {last_connected}"


def status_css_class(status: str) -> str:
    """CSS class for a device status label.

    ``"Connected"`` is shown as success, ``"Reconnecting"`` as a warning,
    and anything else is dimmed.
    """
    return _STATUS_CLASSES.get(status, _DEFAULT_STATUS_CLASS)


def format_fingerprint_two_lines(fp: str) -> str:
    """Split a colon-separated fingerprint over two lines, the first holding the larger half."""
    parts = fp.split(":")
    half = (len(parts) + 1) // 2
    first, second = parts[:half], parts[half:]
    if not second:
        return ":".join(first)
    return ":".join(first) + "\n" + ":".join(second)