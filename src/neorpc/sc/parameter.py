"""
Typed contract parameters for NEO 2.x invocations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from ..types import UInt160, UInt256


class ContractParameterType(IntEnum):
    SIGNATURE = 0x00
    BOOLEAN = 0x01
    INTEGER = 0x02
    HASH160 = 0x03
    HASH256 = 0x04
    BYTE_ARRAY = 0x05
    PUBLIC_KEY = 0x06
    STRING = 0x07
    ARRAY = 0x10
    INTEROP_INTERFACE = 0xF0
    VOID = 0xFF

    @property
    def json_name(self) -> str:
        """Name as the node spells it in JSON (``Hash160``, ``ByteArray``...)."""
        return _JSON_NAMES[self]


_JSON_NAMES = {
    ContractParameterType.SIGNATURE: "Signature",
    ContractParameterType.BOOLEAN: "Boolean",
    ContractParameterType.INTEGER: "Integer",
    ContractParameterType.HASH160: "Hash160",
    ContractParameterType.HASH256: "Hash256",
    ContractParameterType.BYTE_ARRAY: "ByteArray",
    ContractParameterType.PUBLIC_KEY: "PublicKey",
    ContractParameterType.STRING: "String",
    ContractParameterType.ARRAY: "Array",
    ContractParameterType.INTEROP_INTERFACE: "InteropInterface",
    ContractParameterType.VOID: "Void",
}


@dataclass(frozen=True)
class ContractParameter:
    """
    One argument of a contract call.

    Value shapes by type:
        BOOLEAN: bool
        INTEGER: int
        HASH160 / HASH256: UInt160 / UInt256
        SIGNATURE / BYTE_ARRAY / PUBLIC_KEY: bytes
        STRING: str
        ARRAY: list[ContractParameter]
    """
    type: ContractParameterType
    value: Any

    @classmethod
    def hash160(cls, value: UInt160) -> "ContractParameter":
        return cls(ContractParameterType.HASH160, value)

    @classmethod
    def hash256(cls, value: UInt256) -> "ContractParameter":
        return cls(ContractParameterType.HASH256, value)

    @classmethod
    def integer(cls, value: int) -> "ContractParameter":
        return cls(ContractParameterType.INTEGER, value)

    @classmethod
    def boolean(cls, value: bool) -> "ContractParameter":
        return cls(ContractParameterType.BOOLEAN, value)

    @classmethod
    def byte_array(cls, value: bytes) -> "ContractParameter":
        return cls(ContractParameterType.BYTE_ARRAY, bytes(value))

    @classmethod
    def string(cls, value: str) -> "ContractParameter":
        return cls(ContractParameterType.STRING, value)

    @classmethod
    def array(cls, values: list["ContractParameter"]) -> "ContractParameter":
        return cls(ContractParameterType.ARRAY, list(values))

    def to_json(self) -> dict[str, Any]:
        """Serialize into the ``{"type", "value"}`` form `invokefunction` expects."""
        t = self.type
        if t in (ContractParameterType.HASH160, ContractParameterType.HASH256):
            value: Any = str(self.value)
        elif t in (
            ContractParameterType.SIGNATURE,
            ContractParameterType.BYTE_ARRAY,
            ContractParameterType.PUBLIC_KEY,
        ):
            value = bytes(self.value).hex()
        elif t == ContractParameterType.INTEGER:
            value = str(int(self.value))
        elif t == ContractParameterType.ARRAY:
            value = [p.to_json() for p in self.value]
        else:
            value = self.value
        return {"type": t.json_name, "value": value}
