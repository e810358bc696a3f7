from __future__ import annotations

from pyepaper._hashing import normalize_hash, simple_hash


def test_empty_input_hashes_to_zero() -> None:
    assert simple_hash(b"") == "0"


def test_small_inputs_match_rolling_formula() -> None:
    assert simple_hash(b"a") == "97"
    assert simple_hash(b"ab") == str(97 * 31 + 98)


def test_matches_java_string_hash_for_ascii() -> None:
    assert simple_hash(b"hello") == "99162322"


def test_wraps_to_signed_32_bit() -> None:
    # Well-known input whose 31-multiplier hash is exactly INT32_MIN.
    assert simple_hash(b"polygenelubricants") == "-2147483648"


def test_large_input_stays_in_int32_range() -> None:
    value = int(simple_hash(bytes(range(256)) * 64))
    assert -(2**31) <= value < 2**31


def test_deterministic_and_content_sensitive() -> None:
    payload = b"\x00\x01\xfe\xff" * 100
    assert simple_hash(payload) == simple_hash(bytes(payload))
    assert simple_hash(payload) != simple_hash(payload + b"\x00")


def test_normalize_hash() -> None:
    assert normalize_hash(-12) == "-12"
    assert normalize_hash(12.0) == "12"
    assert normalize_hash("abc") == "abc"
    assert normalize_hash(None) is None
    assert normalize_hash("") is None
    assert normalize_hash(True) is None
