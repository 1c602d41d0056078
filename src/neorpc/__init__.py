import logging

__all__ = [
    # RPC client
    "RpcClient",
    "InvalidEndpointError",
    "get_rpc_url",
    "get_rpc_timeout",
    # Results
    "Result",
    "Success",
    "Failure",
    "RpcError",
    "ErrorKind",
    # Errors raised by unwrap()
    "NeoRpcError",
    "TransportError",
    "NodeError",
    "ResponseDecodeError",
    "ExecutionFaultError",
    "EmptyStackError",
    "ConversionError",
    # Scripts
    "ContractParameter",
    "ContractParameterType",
    "ScriptBuilder",
    # NEP-5
    "Nep5Helper",
    # Types
    "UInt160",
    "UInt256",
]

from .rpc.client import InvalidEndpointError, RpcClient, get_rpc_timeout, get_rpc_url
from .rpc.result import (
    ConversionError,
    EmptyStackError,
    ErrorKind,
    ExecutionFaultError,
    Failure,
    NeoRpcError,
    NodeError,
    ResponseDecodeError,
    Result,
    RpcError,
    Success,
    TransportError,
)
from .sc.builder import ScriptBuilder
from .sc.parameter import ContractParameter, ContractParameterType
from .nep5.helper import Nep5Helper
from .types import UInt160, UInt256

logging.getLogger(__name__).addHandler(logging.NullHandler())
