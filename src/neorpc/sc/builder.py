"""
NEO 2.x script builder.

Produces the AVM bytecode for a contract invocation: arguments pushed in
reverse order and packed into an array, the operation name, then APPCALL
with the target script hash.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Optional, Sequence

from ..types import UInt160
from ..utils import int_to_signed_le
from .parameter import ContractParameter, ContractParameterType

logger = logging.getLogger(__name__)


class OpCode(IntEnum):
    PUSH0 = 0x00
    PUSHBYTES75 = 0x4B
    PUSHDATA1 = 0x4C
    PUSHDATA2 = 0x4D
    PUSHDATA4 = 0x4E
    PUSHM1 = 0x4F
    PUSH1 = 0x51
    APPCALL = 0x67
    TAILCALL = 0x69
    PACK = 0xC1

    PUSHF = 0x00
    PUSHT = 0x51


class ScriptBuilder:
    """Accumulates VM instructions; every ``emit_*`` returns ``self``."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def emit(self, op: OpCode, arg: Optional[bytes] = None) -> "ScriptBuilder":
        self._buffer.append(int(op))
        if arg:
            self._buffer.extend(arg)
        return self

    def emit_push_int(self, number: int) -> "ScriptBuilder":
        if number == -1:
            return self.emit(OpCode.PUSHM1)
        if number == 0:
            return self.emit(OpCode.PUSH0)
        if 0 < number <= 16:
            self._buffer.append(OpCode.PUSH1 - 1 + number)
            return self
        return self.emit_push_bytes(int_to_signed_le(number))

    def emit_push_bool(self, value: bool) -> "ScriptBuilder":
        return self.emit(OpCode.PUSHT if value else OpCode.PUSHF)

    def emit_push_bytes(self, data: bytes) -> "ScriptBuilder":
        length = len(data)
        if length <= OpCode.PUSHBYTES75:
            self._buffer.append(length)
            self._buffer.extend(data)
        elif length < 0x100:
            self.emit(OpCode.PUSHDATA1, length.to_bytes(1, "little"))
            self._buffer.extend(data)
        elif length < 0x10000:
            self.emit(OpCode.PUSHDATA2, length.to_bytes(2, "little"))
            self._buffer.extend(data)
        elif length < 0x100000000:
            self.emit(OpCode.PUSHDATA4, length.to_bytes(4, "little"))
            self._buffer.extend(data)
        else:
            raise ValueError(f"Push data too large: {length} bytes")
        return self

    def emit_push_string(self, value: str) -> "ScriptBuilder":
        return self.emit_push_bytes(value.encode("utf-8"))

    def emit_push_parameter(self, param: ContractParameter) -> "ScriptBuilder":
        t = param.type
        if t in (
            ContractParameterType.SIGNATURE,
            ContractParameterType.BYTE_ARRAY,
            ContractParameterType.PUBLIC_KEY,
        ):
            return self.emit_push_bytes(bytes(param.value))
        if t == ContractParameterType.BOOLEAN:
            return self.emit_push_bool(bool(param.value))
        if t == ContractParameterType.INTEGER:
            return self.emit_push_int(int(param.value))
        if t in (ContractParameterType.HASH160, ContractParameterType.HASH256):
            return self.emit_push_bytes(param.value.to_array())
        if t == ContractParameterType.STRING:
            return self.emit_push_string(str(param.value))
        if t == ContractParameterType.ARRAY:
            return self._emit_pack(param.value)
        raise ValueError(f"Unsupported contract parameter type: {t.json_name}")

    def emit_app_call(self, script_hash: UInt160, use_tail_call: bool = False) -> "ScriptBuilder":
        op = OpCode.TAILCALL if use_tail_call else OpCode.APPCALL
        return self.emit(op, script_hash.to_array())

    def make_invocation_script(
        self,
        script_hash: UInt160,
        operation: str,
        args: Sequence[ContractParameter] = (),
    ) -> "ScriptBuilder":
        if args:
            self._emit_pack(args)
        else:
            self.emit_push_bool(False)
        self.emit_push_string(operation)
        self.emit_app_call(script_hash)
        logger.debug("Built invocation of %s on %s (%d args)", operation, script_hash, len(args))
        return self

    def _emit_pack(self, items: Sequence[ContractParameter]) -> "ScriptBuilder":
        for item in reversed(items):
            self.emit_push_parameter(item)
        self.emit_push_int(len(items))
        return self.emit(OpCode.PACK)

    def to_array(self) -> bytes:
        return bytes(self._buffer)

    def to_hex(self) -> str:
        return self._buffer.hex()
