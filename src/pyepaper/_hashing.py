"""Content fingerprint used to validate cached bitmaps.

The display server reports the same digest in each bitmap's metadata, so
the algorithm must match it bit for bit: a 31-multiplier rolling hash
over the raw bytes, wrapped to a signed 32-bit integer after every step.
"""

from __future__ import annotations

_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _to_int32(value: int) -> int:
    value &= _MASK_32
    return value - 0x100000000 if value & _SIGN_BIT else value


def simple_hash(data: bytes) -> str:
    """Compute the fingerprint of *data*.

    Parameters
    ----------
    data : bytes
        Raw content to hash.

    Returns
    -------
    str
        Signed 32-bit digest rendered in decimal (e.g. ``"-1520245162"``).
        The empty input hashes to ``"0"``.
    """
    h = 0
    for byte_val in data:
        h = _to_int32((h << 5) - h + byte_val)
    return str(h)


def normalize_hash(value: object) -> str | None:
    """Coerce a reported hash (string or number) to its string form."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)
