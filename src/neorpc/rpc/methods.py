"""
Declarative table of the node RPC surface.

Each ``RpcMethod`` names the remote method, the literal values the node
expects after the caller's arguments, and the decoder that turns the
``result`` payload into a typed value. ``RpcClient.call`` consumes these.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from . import models

T = TypeVar("T")

# Trailing verbosity flag for block, header and transaction queries, and
# for sendrawtransaction. Part of the node's expected signature.
VERBOSE = 1


def _int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Expected integer, got {value!r}")
    return int(value)


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected string, got {type(value).__name__}")
    return value


def _bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Expected boolean, got {type(value).__name__}")
    return value


def _optional(decode: Callable[[Any], T]) -> Callable[[Any], Optional[T]]:
    def _decode(value: Any) -> Optional[T]:
        return None if value is None else decode(value)
    return _decode


def _list_of(decode: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def _decode(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise TypeError(f"Expected list, got {type(value).__name__}")
        return [decode(v) for v in value]
    return _decode


@dataclass(frozen=True)
class RpcMethod(Generic[T]):
    name: str
    decode: Callable[[Any], T]
    trailing: tuple[Any, ...] = ()

    def params(self, args: tuple[Any, ...]) -> list[Any]:
        """Positional params: caller args without trailing ``None`` ones, then literals."""
        values = list(args)
        while values and values[-1] is None:
            values.pop()
        return values + list(self.trailing)


CLAIM_GAS = RpcMethod("claimgas", models.Transaction.from_json)
GET_ACCOUNT_STATE = RpcMethod("getaccountstate", models.AccountState.from_json)
GET_APPLICATION_LOG = RpcMethod("getapplicationlog", models.ApplicationLog.from_json)
GET_ASSET_STATE = RpcMethod("getassetstate", models.AssetState.from_json)
GET_BALANCE = RpcMethod("getbalance", models.WalletBalance.from_json)
GET_BEST_BLOCK_HASH = RpcMethod("getbestblockhash", _str)
GET_BLOCK = RpcMethod("getblock", models.Block.from_json, (VERBOSE,))
GET_BLOCK_COUNT = RpcMethod("getblockcount", _int)
GET_BLOCK_HASH = RpcMethod("getblockhash", _str)
GET_BLOCK_HEADER = RpcMethod("getblockheader", models.BlockHeader.from_json, (VERBOSE,))
GET_CLAIMABLE = RpcMethod("getclaimable", models.Claimable.from_json)
GET_CONNECTION_COUNT = RpcMethod("getconnectioncount", _int)
GET_CONTRACT_STATE = RpcMethod("getcontractstate", models.ContractState.from_json)
GET_NEP5_BALANCES = RpcMethod("getnep5balances", models.Nep5Balances.from_json)
GET_NEP5_TRANSFERS = RpcMethod("getnep5transfers", models.Nep5Transfers.from_json)
GET_NEW_ADDRESS = RpcMethod("getnewaddress", _str)
GET_PEERS = RpcMethod("getpeers", models.Peers.from_json)
GET_RAW_MEMPOOL = RpcMethod("getrawmempool", _list_of(_str))
GET_RAW_TRANSACTION = RpcMethod("getrawtransaction", models.Transaction.from_json, (VERBOSE,))
GET_STORAGE = RpcMethod("getstorage", _optional(_str))
GET_TRANSACTION_HEIGHT = RpcMethod("gettransactionheight", _int)
GET_TX_OUT = RpcMethod("gettxout", _optional(models.TxOutput.from_json))
GET_UNCLAIMED_GAS = RpcMethod("getunclaimedgas", models.UnclaimedGas.from_json)
GET_UNCLAIMED = RpcMethod("getunclaimed", models.Unclaimed.from_json)
GET_UNSPENTS = RpcMethod("getunspents", models.Unspents.from_json)
GET_VALIDATORS = RpcMethod("getvalidators", _list_of(models.Validator.from_json))
GET_VERSION = RpcMethod("getversion", models.Version.from_json)
GET_WALLET_HEIGHT = RpcMethod("getwalletheight", _int)
IMPORT_PRIV_KEY = RpcMethod("importprivkey", models.WalletAddress.from_json)
INVOKE_FUNCTION = RpcMethod("invokefunction", models.InvokeResult.from_json)
INVOKE_SCRIPT = RpcMethod("invokescript", models.InvokeResult.from_json)
LIST_ADDRESS = RpcMethod("listaddress", _list_of(models.WalletAddress.from_json))
LIST_PLUGINS = RpcMethod("listplugins", _list_of(models.Plugin.from_json))
SEND_FROM = RpcMethod("sendfrom", models.Transaction.from_json)
SEND_MANY = RpcMethod("sendmany", models.Transaction.from_json)
SEND_RAW_TRANSACTION = RpcMethod("sendrawtransaction", _bool, (VERBOSE,))
SEND_TO_ADDRESS = RpcMethod("sendtoaddress", models.Transaction.from_json)
SUBMIT_BLOCK = RpcMethod("submitblock", _bool)
VALIDATE_ADDRESS = RpcMethod("validateaddress", models.ValidateAddress.from_json)
GET_PROOF = RpcMethod("getproof", models.CrossChainProof.from_json)
GET_STATE_HEIGHT = RpcMethod("getstateheight", models.StateHeight.from_json)
GET_STATE_ROOT = RpcMethod("getstateroot", models.StateRootState.from_json)
