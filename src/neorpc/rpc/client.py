"""
JSON-RPC client for a NEO 2.x full node.

Uses one httpx client per instance, closes the connection after every
exchange, and returns ``Success``/``Failure`` results instead of raising.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Sequence, Union

import httpx
from dotenv import load_dotenv

from ..sc.parameter import ContractParameter
from . import methods, models
from .methods import RpcMethod
from .result import ErrorKind, Failure, Result, Success

logger = logging.getLogger(__name__)

# Default RPC endpoint (local NEO 2.x node, mainnet RPC port)
DEFAULT_RPC_URL = "http://localhost:10332"
DEFAULT_TIMEOUT = 60.0
JSONRPC_VERSION = "2.0"
REQUEST_ID = 1


class InvalidEndpointError(ValueError):
    pass


def get_rpc_url() -> str:
    """Get the RPC URL from environment (or .env) or default."""
    load_dotenv()
    return os.environ.get("NEO_RPC_URL", DEFAULT_RPC_URL)


def get_rpc_timeout() -> float:
    """Get the request timeout in seconds from environment (or .env) or default."""
    load_dotenv()
    return float(os.environ.get("NEO_RPC_TIMEOUT", str(DEFAULT_TIMEOUT)))


def _parse_endpoint(endpoint: str) -> httpx.URL:
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpointError(f"Invalid RPC endpoint {endpoint!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidEndpointError(
            f"Invalid RPC endpoint {endpoint!r}: expected an http(s) URL with a host"
        )
    return url


def _error_code(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _param_json(value: Any) -> Any:
    if isinstance(value, ContractParameter):
        return value.to_json()
    return value


class RpcClient:
    """
    Synchronous NEO node RPC client.

    Every public method maps to exactly one RPC method (except
    ``get_block_header_by_index``, which resolves the hash first) and
    returns ``Success`` with the decoded payload or ``Failure`` with an
    ``RpcError``. There are no retries.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            endpoint: Node URL (default: NEO_RPC_URL env var or localhost)
            timeout: Total seconds a request may take (default: 60)
            transport: Custom httpx transport, e.g. ``httpx.MockTransport``

        Raises:
            InvalidEndpointError: If the endpoint is not an http(s) URL
        """
        self._endpoint = _parse_endpoint(endpoint or get_rpc_url())
        self._timeout = timeout if timeout is not None else get_rpc_timeout()
        self._http = httpx.Client(
            timeout=self._timeout,
            headers={"Content-Type": "application/json", "Connection": "close"},
            limits=httpx.Limits(max_keepalive_connections=0),
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return str(self._endpoint)

    @property
    def timeout(self) -> float:
        return self._timeout

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def call(self, method: RpcMethod, *args: Any) -> Result:
        """
        Make a JSON-RPC call described by ``method``.

        Args:
            method: Descriptor (name, trailing literals, decoder)
            *args: Positional arguments in node order; trailing ``None`` ones
                are omitted

        Returns:
            Success with the decoded result, or Failure
        """
        payload = {
            "jsonrpc": JSONRPC_VERSION,
            "id": REQUEST_ID,
            "method": method.name,
            "params": [_param_json(p) for p in method.params(args)],
        }
        logger.debug("RPC %s -> %s params=%s", method.name, self._endpoint, payload["params"])

        try:
            response = self._http.post(self._endpoint, json=payload)
        except httpx.HTTPError as exc:
            return self._fail(method, ErrorKind.TRANSPORT, str(exc) or type(exc).__name__)

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_error:
                return self._fail(
                    method,
                    ErrorKind.TRANSPORT,
                    f"HTTP {response.status_code} {response.reason_phrase}",
                )
            return self._fail(method, ErrorKind.DECODE, f"invalid JSON response: {exc}")

        if not isinstance(body, dict):
            return self._fail(method, ErrorKind.DECODE, "response is not a JSON object")

        error = body.get("error")
        # An error object without a message does not void a result sent alongside it.
        if isinstance(error, dict) and not error.get("message") and "result" in body:
            error = None
        if error:
            if isinstance(error, dict):
                return self._fail(
                    method,
                    ErrorKind.NODE,
                    str(error.get("message") or "unknown node error"),
                    code=_error_code(error.get("code")),
                    data=error.get("data"),
                )
            return self._fail(method, ErrorKind.NODE, str(error))

        if "result" not in body:
            return self._fail(method, ErrorKind.DECODE, "response has no result")

        try:
            return Success(method.decode(body["result"]))
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as exc:
            return self._fail(
                method, ErrorKind.DECODE, f"cannot decode {method.name} result: {exc!r}"
            )

    @staticmethod
    def _fail(method: RpcMethod, kind: ErrorKind, message: str, **extra: Any) -> Failure:
        logger.warning("RPC %s failed (%s): %s", method.name, kind.value, message)
        return Failure.of(kind, message, **extra)

    # ------------------------------------------------------------------
    # Accounts, assets, contracts
    # ------------------------------------------------------------------

    def get_account_state(self, address: str) -> Result[models.AccountState]:
        """Global asset balances of an address."""
        return self.call(methods.GET_ACCOUNT_STATE, address)

    def get_asset_state(self, asset_id: str) -> Result[models.AssetState]:
        return self.call(methods.GET_ASSET_STATE, asset_id)

    def get_contract_state(self, script_hash: str) -> Result[models.ContractState]:
        return self.call(methods.GET_CONTRACT_STATE, script_hash)

    def get_storage(self, script_hash: str, key: str) -> Result[Optional[str]]:
        """Hex value stored under ``key`` (hex) in a contract, None if absent."""
        return self.call(methods.GET_STORAGE, script_hash, key)

    def get_claimable(self, address: str) -> Result[models.Claimable]:
        return self.call(methods.GET_CLAIMABLE, address)

    def get_unclaimed(self, address: str) -> Result[models.Unclaimed]:
        return self.call(methods.GET_UNCLAIMED, address)

    def get_unspents(self, address: str) -> Result[models.Unspents]:
        return self.call(methods.GET_UNSPENTS, address)

    def validate_address(self, address: str) -> Result[models.ValidateAddress]:
        return self.call(methods.VALIDATE_ADDRESS, address)

    # Requires the RpcNep5Tracker plugin.
    def get_nep5_balances(self, address: str) -> Result[models.Nep5Balances]:
        return self.call(methods.GET_NEP5_BALANCES, address)

    # Requires the RpcNep5Tracker plugin.
    def get_nep5_transfers(self, address: str) -> Result[models.Nep5Transfers]:
        return self.call(methods.GET_NEP5_TRANSFERS, address)

    # Requires the ApplicationLogs plugin.
    def get_application_log(self, tx_id: str) -> Result[models.ApplicationLog]:
        return self.call(methods.GET_APPLICATION_LOG, tx_id)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def get_best_block_hash(self) -> Result[str]:
        return self.call(methods.GET_BEST_BLOCK_HASH)

    def get_block_count(self) -> Result[int]:
        return self.call(methods.GET_BLOCK_COUNT)

    def get_block_hash(self, index: int) -> Result[str]:
        return self.call(methods.GET_BLOCK_HASH, index)

    def get_block_by_hash(self, block_hash: str) -> Result[models.Block]:
        return self.call(methods.GET_BLOCK, block_hash)

    def get_block_by_index(self, index: int) -> Result[models.Block]:
        return self.call(methods.GET_BLOCK, index)

    def get_block_header_by_hash(self, block_hash: str) -> Result[models.BlockHeader]:
        return self.call(methods.GET_BLOCK_HEADER, block_hash)

    def get_block_header_by_index(self, index: int) -> Result[models.BlockHeader]:
        """Resolve the block hash for ``index``, then fetch its header."""
        hash_result = self.get_block_hash(index)
        if not hash_result.ok:
            return hash_result
        return self.get_block_header_by_hash(hash_result.value)

    def submit_block(self, block_hex: str) -> Result[bool]:
        return self.call(methods.SUBMIT_BLOCK, block_hex)

    # ------------------------------------------------------------------
    # Transactions and mempool
    # ------------------------------------------------------------------

    def get_raw_mempool(self) -> Result[list[str]]:
        return self.call(methods.GET_RAW_MEMPOOL)

    def get_raw_transaction(self, tx_id: str) -> Result[models.Transaction]:
        return self.call(methods.GET_RAW_TRANSACTION, tx_id)

    def get_transaction_height(self, tx_id: str) -> Result[int]:
        return self.call(methods.GET_TRANSACTION_HEIGHT, tx_id)

    def get_tx_out(self, tx_id: str, index: int) -> Result[Optional[models.TxOutput]]:
        """Unspent output ``index`` of a transaction, None if already spent."""
        return self.call(methods.GET_TX_OUT, tx_id, index)

    def send_raw_transaction(self, raw_tx_hex: str) -> Result[bool]:
        return self.call(methods.SEND_RAW_TRANSACTION, raw_tx_hex)

    # ------------------------------------------------------------------
    # Node and network
    # ------------------------------------------------------------------

    def get_connection_count(self) -> Result[int]:
        return self.call(methods.GET_CONNECTION_COUNT)

    def get_peers(self) -> Result[models.Peers]:
        return self.call(methods.GET_PEERS)

    def get_validators(self) -> Result[list[models.Validator]]:
        return self.call(methods.GET_VALIDATORS)

    def get_version(self) -> Result[models.Version]:
        return self.call(methods.GET_VERSION)

    def list_plugins(self) -> Result[list[models.Plugin]]:
        return self.call(methods.LIST_PLUGINS)

    # ------------------------------------------------------------------
    # Wallet (requires the RpcWallet plugin and an open wallet)
    # ------------------------------------------------------------------

    def claim_gas(self, address: str) -> Result[models.Transaction]:
        return self.call(methods.CLAIM_GAS, address)

    def get_balance(self, asset_id: str) -> Result[models.WalletBalance]:
        return self.call(methods.GET_BALANCE, asset_id)

    def get_new_address(self) -> Result[str]:
        return self.call(methods.GET_NEW_ADDRESS)

    def get_unclaimed_gas(self) -> Result[models.UnclaimedGas]:
        return self.call(methods.GET_UNCLAIMED_GAS)

    def get_wallet_height(self) -> Result[int]:
        return self.call(methods.GET_WALLET_HEIGHT)

    def import_priv_key(self, wif: str) -> Result[models.WalletAddress]:
        return self.call(methods.IMPORT_PRIV_KEY, wif)

    def list_address(self) -> Result[list[models.WalletAddress]]:
        return self.call(methods.LIST_ADDRESS)

    def send_from(
        self,
        asset_id: str,
        from_address: str,
        to_address: str,
        amount: Union[int, float],
        fee: Union[int, float] = 0,
        change_address: Optional[str] = None,
    ) -> Result[models.Transaction]:
        return self.call(
            methods.SEND_FROM, asset_id, from_address, to_address, amount, fee, change_address
        )

    def send_to_address(
        self,
        asset_id: str,
        to_address: str,
        amount: Union[int, float],
        fee: Union[int, float] = 0,
        change_address: Optional[str] = None,
    ) -> Result[models.Transaction]:
        return self.call(methods.SEND_TO_ADDRESS, asset_id, to_address, amount, fee, change_address)

    def send_many(
        self,
        outputs: Sequence[dict[str, Any]],
        fee: Union[int, float] = 0,
        change_address: Optional[str] = None,
    ) -> Result[models.Transaction]:
        """
        Send to several recipients in one transaction.

        Args:
            outputs: ``[{"asset": ..., "value": ..., "address": ...}, ...]``
            fee: Network fee
            change_address: Change address (default: the wallet's first)
        """
        return self.call(methods.SEND_MANY, list(outputs), fee, change_address)

    # ------------------------------------------------------------------
    # Script invocation
    # ------------------------------------------------------------------

    def invoke_function(
        self,
        script_hash: str,
        operation: str,
        args: Optional[Sequence[Union[ContractParameter, dict[str, Any]]]] = None,
        check_witness_hashes: Optional[str] = None,
    ) -> Result[models.InvokeResult]:
        """
        Test-run a contract method by name.

        Args:
            script_hash: Contract script hash (big-endian hex)
            operation: Method name
            args: Contract parameters; omitted from params when None and no
                witness hashes follow
            check_witness_hashes: Script hashes the node treats as witnessed
        """
        if args is None:
            json_args = [] if check_witness_hashes is not None else None
        else:
            json_args = [_param_json(a) for a in args]
        return self.call(
            methods.INVOKE_FUNCTION, script_hash, operation, json_args, check_witness_hashes
        )

    def invoke_script(
        self,
        script_hex: str,
        check_witness_hashes: Optional[str] = None,
    ) -> Result[models.InvokeResult]:
        """Test-run raw VM script (hex)."""
        return self.call(methods.INVOKE_SCRIPT, script_hex, check_witness_hashes)

    # ------------------------------------------------------------------
    # State root (requires the StateRoot plugin)
    # ------------------------------------------------------------------

    def get_proof(
        self, state_root: str, script_hash: str, store_key: str
    ) -> Result[models.CrossChainProof]:
        """Merkle proof of a storage item against a state root."""
        return self.call(methods.GET_PROOF, state_root, script_hash, store_key)

    def get_state_height(self) -> Result[models.StateHeight]:
        return self.call(methods.GET_STATE_HEIGHT)

    def get_state_root_by_index(self, block_height: int) -> Result[models.StateRootState]:
        return self.call(methods.GET_STATE_ROOT, block_height)

    def get_state_root_by_hash(self, block_hash: str) -> Result[models.StateRootState]:
        return self.call(methods.GET_STATE_ROOT, block_hash)
