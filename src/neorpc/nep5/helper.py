"""
NEP-5 token helper.

Builds an invocation script for one of the standard NEP-5 methods, submits
it with `invokescript`, and decodes the top of the result stack:

- totalSupply / balanceOf: hex bytes, little-endian uint64
- name / symbol:           hex bytes, UTF-8 text
- decimals:                decimal text, 0..255
- transfer:                boolean literal

Reference: https://github.com/neo-project/proposals/blob/master/nep-5.mediawiki
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, Sequence, TypeVar

from ..rpc.client import RpcClient
from ..rpc.models import InvokeResult, StackItem
from ..rpc.result import ErrorKind, Failure, Result, Success
from ..sc.builder import ScriptBuilder
from ..sc.parameter import ContractParameter
from ..types import UInt160
from ..utils import UINT64_MAX, hex_to_bytes, le_uint64

logger = logging.getLogger(__name__)

T = TypeVar("T")

MSG_FAULT = "engine faulted"
MSG_EMPTY_STACK = "no stack result returned"
MSG_CONVERSION = "conversion failed"

UINT8_MAX = 0xFF

_DIGITS_RE = re.compile(r"[0-9]+")

# Boolean literals a stack value may carry.
_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class Nep5Helper:
    """
    Typed access to a NEP-5 token contract through a node.

    Every operation returns ``Success`` with the decoded value or
    ``Failure`` whose ``kind`` tells which check failed: ``node`` /
    ``transport`` / ``decode`` from the RPC layer, then ``fault``,
    ``empty_stack`` and ``conversion``.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        client: Optional[RpcClient] = None,
    ) -> None:
        """
        Args:
            endpoint: Node URL, used when no client is given
            client: Existing RPC client to share

        Raises:
            InvalidEndpointError: If a client has to be built and the
                endpoint is not a valid URL
        """
        self.client = client if client is not None else RpcClient(endpoint)
        self.endpoint = self.client.endpoint

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Nep5Helper":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # NEP-5 methods
    # ------------------------------------------------------------------

    def total_supply(self, script_hash: UInt160) -> Result[int]:
        return self._query(script_hash, "totalSupply", (), _decode_uint64)

    def name(self, script_hash: UInt160) -> Result[str]:
        return self._query(script_hash, "name", (), _decode_text)

    def symbol(self, script_hash: UInt160) -> Result[str]:
        return self._query(script_hash, "symbol", (), _decode_text)

    def decimals(self, script_hash: UInt160) -> Result[int]:
        return self._query(script_hash, "decimals", (), _decode_uint8)

    def balance_of(self, script_hash: UInt160, address: UInt160) -> Result[int]:
        return self._query(
            script_hash,
            "balanceOf",
            (ContractParameter.hash160(address),),
            _decode_uint64,
        )

    def transfer(
        self,
        script_hash: UInt160,
        from_address: UInt160,
        to_address: UInt160,
        amount: int,
    ) -> Result[bool]:
        """
        Invoke ``transfer(from, to, amount)``.

        No witness is attached, so the node evaluates the script without
        the sender's signature; the result reflects that evaluation.

        Raises:
            ValueError: If amount is outside the uint64 range
        """
        if not 0 <= amount <= UINT64_MAX:
            raise ValueError(f"amount must be an unsigned 64-bit integer, got {amount}")
        args = (
            ContractParameter.hash160(from_address),
            ContractParameter.hash160(to_address),
            ContractParameter.integer(amount),
        )
        return self._query(script_hash, "transfer", args, _decode_bool)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _query(
        self,
        script_hash: UInt160,
        operation: str,
        args: Sequence[ContractParameter],
        decode: Callable[[Any], T],
    ) -> Result[T]:
        script = ScriptBuilder().make_invocation_script(script_hash, operation, args).to_hex()
        response = self.client.invoke_script(script)
        if not response.ok:
            return response

        top = _top_of_stack(response.value)
        if not top.ok:
            logger.warning("NEP-5 %s on %s failed: %s", operation, script_hash, top.error)
            return top

        try:
            return Success(decode(top.value.value))
        except (TypeError, ValueError) as exc:
            logger.warning(
                "NEP-5 %s on %s returned undecodable value %r: %s",
                operation, script_hash, top.value.value, exc,
            )
            return Failure.of(ErrorKind.CONVERSION, MSG_CONVERSION)


def _top_of_stack(result: InvokeResult) -> Result[StackItem]:
    if result.faulted:
        return Failure.of(ErrorKind.FAULT, MSG_FAULT)
    if not result.stack:
        return Failure.of(ErrorKind.EMPTY_STACK, MSG_EMPTY_STACK)
    return Success(result.stack[0])


def _stack_bytes(value: Any) -> bytes:
    if value is None:
        return b""
    if not isinstance(value, str):
        raise TypeError(f"expected hex string, got {type(value).__name__}")
    return hex_to_bytes(value)


def _decode_uint64(value: Any) -> int:
    return le_uint64(_stack_bytes(value))


def _decode_text(value: Any) -> str:
    return _stack_bytes(value).decode("utf-8", errors="replace")


def _decode_uint8(value: Any) -> int:
    text = str(value)
    if isinstance(value, bool) or not _DIGITS_RE.fullmatch(text):
        raise ValueError(f"not an unsigned decimal: {text!r}")
    number = int(text)
    if number > UINT8_MAX:
        raise ValueError(f"{number} does not fit in 8 bits")
    return number


def _decode_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value)
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"not a boolean literal: {text!r}")
