"""
deflation.types.address — fixed-width account identifiers.

An `Address` wraps exactly 20 raw bytes. It is hashable, equality-comparable
and totally ordered (bytewise), so state iteration can always be done in a
deterministic order. Text I/O is lower-case 0x-hex; parsing tolerates mixed
case (checksummed inputs) but does not validate checksums.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ADDRESS_LEN = 20

AddressLike = Union["Address", str, bytes, bytearray, memoryview]


def _hex_to_bytes(v: str) -> bytes:
    s = v.strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex address: {v!r}") from e


@dataclass(frozen=True, order=True)
class Address:
    """A 20-byte account identifier."""
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray, memoryview)):
            raise TypeError(f"address must be bytes-like, got {type(self.raw).__name__}")
        raw = bytes(self.raw)
        if len(raw) != ADDRESS_LEN:
            raise ValueError(f"address must be {ADDRESS_LEN} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        return cls(_hex_to_bytes(value))

    def hex(self) -> str:
        return "0x" + self.raw.hex()

    def is_zero(self) -> bool:
        return self.raw == bytes(ADDRESS_LEN)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Address({self.hex()})"


ZERO_ADDRESS = Address(bytes(ADDRESS_LEN))


def to_address(value: AddressLike) -> Address:
    """Coerce hex strings or raw bytes into an Address (Address passes through)."""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.from_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Address(bytes(value))
    raise TypeError(f"expected address-like value, got {type(value).__name__}")


__all__ = ["ADDRESS_LEN", "Address", "AddressLike", "ZERO_ADDRESS", "to_address"]
