"""
Result types for RPC and NEP-5 operations.

Every client and helper operation returns either ``Success`` carrying the
typed value or ``Failure`` carrying an ``RpcError``. Nothing is raised for
transport, node or decoding problems; callers branch on ``result.ok`` or
call ``unwrap()`` to get an exception instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    NODE = "node"
    DECODE = "decode"
    FAULT = "fault"
    EMPTY_STACK = "empty_stack"
    CONVERSION = "conversion"


class NeoRpcError(RuntimeError):
    kind: ErrorKind = ErrorKind.NODE

    def __init__(self, message: str, code: int = 0, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data


class TransportError(NeoRpcError):
    kind = ErrorKind.TRANSPORT


class NodeError(NeoRpcError):
    kind = ErrorKind.NODE


class ResponseDecodeError(NeoRpcError):
    kind = ErrorKind.DECODE


class ExecutionFaultError(NeoRpcError):
    kind = ErrorKind.FAULT


class EmptyStackError(NeoRpcError):
    kind = ErrorKind.EMPTY_STACK


class ConversionError(NeoRpcError):
    kind = ErrorKind.CONVERSION


_EXCEPTIONS: dict[ErrorKind, type[NeoRpcError]] = {
    cls.kind: cls
    for cls in (
        TransportError,
        NodeError,
        ResponseDecodeError,
        ExecutionFaultError,
        EmptyStackError,
        ConversionError,
    )
}


@dataclass(frozen=True)
class RpcError:
    """
    A failed call.

    Attributes:
        message: Human-readable text (the node's message for node errors,
            the underlying exception text for transport errors)
        code: JSON-RPC error code, 0 when the failure is local
        kind: Which stage failed
        data: Optional extra payload from the node's error object
    """
    message: str
    code: int = 0
    kind: ErrorKind = ErrorKind.NODE
    data: Any = None

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code={self.code})"
        return self.message

    def to_exception(self) -> NeoRpcError:
        return _EXCEPTIONS[self.kind](self.message, code=self.code, data=self.data)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: RpcError

    ok: ClassVar[bool] = False

    @classmethod
    def of(
        cls,
        kind: ErrorKind,
        message: str,
        code: int = 0,
        data: Any = None,
    ) -> "Failure":
        return cls(RpcError(message=message, code=code, kind=kind, data=data))

    def unwrap(self) -> NoReturn:
        raise self.error.to_exception()


Result = Union[Success[T], Failure]
