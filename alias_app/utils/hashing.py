"""
Namespaced hash of (URL, owner) used to derive default aliases.

The arithmetic below is a storage format, not an implementation detail:
aliases issued earlier are only reproducible if it stays bit-for-bit the
same (multiplier 31, signed 32-bit wraparound over UTF-16 code units,
absolute value rendered in decimal).
"""

_UINT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _utf16_code_units(text: str):
    data = text.encode("utf-16-le")
    for offset in range(0, len(data), 2):
        yield data[offset] | (data[offset + 1] << 8)


def _to_int32(value: int) -> int:
    value &= _UINT32_MASK
    return value - (1 << 32) if value & _INT32_SIGN else value


def namespaced_hash(normalized_url: str, owner_id: str) -> str:
    """
    Hash a normalized URL within an owner's namespace.

    Args:
        normalized_url: URL already passed through the normalizer
        owner_id: Owner identifier (or the anonymous sentinel)

    Returns:
        Decimal string of a non-negative integer, at most 2**31
    """
    combined = f"{normalized_url}:{owner_id}"

    hash_value = 0
    for code_unit in _utf16_code_units(combined):
        hash_value = _to_int32(hash_value * 31 + code_unit)

    return str(abs(hash_value))
