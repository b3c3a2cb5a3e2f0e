"""Content fingerprint used for duplicate/identity display.

32-bit FNV-1a accumulated over UTF-16 code units and rendered as unpadded
lowercase hex. Not a security property.
"""
from __future__ import annotations

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_MASK_32 = 0xFFFFFFFF


def content_hash(content: str) -> str:
    """Return the FNV-1a fingerprint of *content* (``"811c9dc5"`` for ``""``)."""
    value = FNV_OFFSET_BASIS
    data = content.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        value ^= data[i] | (data[i + 1] << 8)
        value = (value * FNV_PRIME) & _MASK_32
    return format(value, "x")
