"""
Fixed-size hash types used by NEO 2.x.

Hashes are held in little-endian byte order (the order the VM and the
serialized structures use) and rendered as big-endian ``0x`` hex text,
matching what the node prints in RPC responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .utils import hex_to_bytes


@dataclass(frozen=True)
class _UIntBase:
    data: bytes

    SIZE: ClassVar[int] = 0

    def __post_init__(self) -> None:
        if len(self.data) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} requires {self.SIZE} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_string(cls, value: str):
        """Parse big-endian hex text (with or without ``0x``)."""
        try:
            raw = hex_to_bytes(value)
        except ValueError as exc:
            raise ValueError(f"Invalid {cls.__name__} hex: {value!r}") from exc
        return cls(raw[::-1])

    @classmethod
    def from_bytes(cls, data: bytes):
        """Wrap little-endian bytes."""
        return cls(bytes(data))

    def to_array(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return "0x" + self.data[::-1].hex()


@dataclass(frozen=True)
class UInt160(_UIntBase):
    """20-byte script hash (contract or account)."""

    SIZE: ClassVar[int] = 20


@dataclass(frozen=True)
class UInt256(_UIntBase):
    """32-byte hash (block, transaction, asset)."""

    SIZE: ClassVar[int] = 32
