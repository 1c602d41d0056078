from __future__ import annotations

UINT64_SIZE = 8
UINT64_MAX = (1 << 64) - 1


def hex_to_bytes(value: str) -> bytes:
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def pad_right(data: bytes, size: int) -> bytes:
    if len(data) >= size:
        return data
    return data + b"\x00" * (size - len(data))


def le_uint64(data: bytes) -> int:
    """Read a little-endian uint64, zero-padding short input on the high side.

    Nodes trim leading zero bytes from small integers, so ``01`` must read
    as 1 and ``0002`` as 512.
    """
    return int.from_bytes(pad_right(data, UINT64_SIZE)[:UINT64_SIZE], "little")


def int_to_signed_le(value: int) -> bytes:
    if value == 0:
        return b""
    length = (value + (value < 0)).bit_length() // 8 + 1
    return value.to_bytes(length, "little", signed=True)
