"""Lenient extraction of device fields from a small JSON object string.

The window receives device descriptions such as
``{"device_id":"...","name":"...","fingerprint":"..."}``. Only plain string
values are read. A value ends at its first double quote, and escapes are not
interpreted.
"""

from typing import Optional, Tuple

DEFAULT_DEVICE_NAME = "Android Device"
"""Name shown when the description carries no usable name."""


def extract_json_str(text: str, key: str) -> Optional[str]:
    """Return the string value that follows the first ``"key"`` in ``text``.

    Return None when the key is absent, when no colon follows it, when the
    value is not a string, or when the string is not terminated.
    """
    needle = f'"{key}"'
    start = text.find(needle)
    if start < 0:
        return None
    before, colon, rest = text[start + len(needle):].partition(":")
    if not colon:
        return None
    after = rest.lstrip()
    if not after.startswith('"'):
        return None
    value, quote, _ = after[1:].partition('"')
    return value if quote else None


def parse_device_json(text: str) -> Tuple[str, str]:
    """Return ``(name, fingerprint)`` from a device description.

    A missing name falls back to ``DEFAULT_DEVICE_NAME``. A missing
    fingerprint falls back to an empty string.
    """
    name = extract_json_str(text, "name")
    fingerprint = extract_json_str(text, "fingerprint")
    return (
        name if name is not None else DEFAULT_DEVICE_NAME,
        fingerprint if fingerprint is not None else "",
    )