"""Tests for the RPC client: envelopes, per-method params, and failure handling."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from conftest import ENDPOINT, FakeNode, make_client
from neorpc.rpc import methods
from neorpc.rpc.client import (
    DEFAULT_RPC_URL,
    DEFAULT_TIMEOUT,
    InvalidEndpointError,
    RpcClient,
    get_rpc_timeout,
    get_rpc_url,
)
from neorpc.rpc.result import (
    ErrorKind,
    Failure,
    NodeError,
    ResponseDecodeError,
    Success,
    TransportError,
)
from neorpc.sc.parameter import ContractParameter
from neorpc.types import UInt160


class TestConstruction:
    def test_valid_endpoint(self) -> None:
        with RpcClient("http://127.0.0.1:10332", timeout=1) as rpc:
            assert rpc.endpoint == "http://127.0.0.1:10332"
            assert rpc.timeout == 1

    @pytest.mark.parametrize(
        "endpoint",
        ["not a url", "ftp://node.test", "http://", "localhost:10332"],
    )
    def test_invalid_endpoint_rejected(self, endpoint: str) -> None:
        with pytest.raises(InvalidEndpointError):
            RpcClient(endpoint)

    def test_invalid_endpoint_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RpcClient("nope")

    def test_default_timeout_is_sixty_seconds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NEO_RPC_TIMEOUT", raising=False)
        with RpcClient(ENDPOINT) as rpc:
            assert rpc.timeout == DEFAULT_TIMEOUT == 60.0


class TestConfig:
    def test_url_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEO_RPC_URL", "http://seed1.example:10332")
        assert get_rpc_url() == "http://seed1.example:10332"

    def test_url_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NEO_RPC_URL", raising=False)
        monkeypatch.setattr("neorpc.rpc.client.load_dotenv", lambda: False)
        assert get_rpc_url() == DEFAULT_RPC_URL

    def test_timeout_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEO_RPC_TIMEOUT", "12.5")
        assert get_rpc_timeout() == 12.5

    def test_client_uses_env_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEO_RPC_URL", "http://seed2.example:20332")
        with RpcClient() as rpc:
            assert rpc.endpoint == "http://seed2.example:20332"


class TestEnvelope:
    def test_request_shape(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("getblockcount", 42)
        result = client.get_block_count()

        assert result == Success(42)
        assert node.last == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getblockcount",
            "params": [],
        }

    def test_post_with_json_and_connection_close(
        self, client: RpcClient, node: FakeNode
    ) -> None:
        node.reply("getblockcount", 1)
        client.get_block_count()

        request = node.requests[-1]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["content-type"] == "application/json"
        assert request.headers["connection"] == "close"


TX_ID = "0x" + "ab" * 32
BLOCK_HASH = "0x" + "cd" * 32
ADDRESS = "AKkkumHbBipZ46UMZJoFynJMXzSRnBvKcs"
ASSET = "0xc56f33fc6ecfcd0c225c4ab356fee59390af8560be0e930faebe74a6daff7c9b"
CONTRACT = "0xecc6b20d3ccac1ee9ef109af5a7cdb85706b1df9"


PARAM_CASES: list[tuple[str, Callable[[RpcClient], Any], str, list[Any]]] = [
    ("claim_gas", lambda c: c.claim_gas(ADDRESS), "claimgas", [ADDRESS]),
    ("get_account_state", lambda c: c.get_account_state(ADDRESS), "getaccountstate", [ADDRESS]),
    ("get_application_log", lambda c: c.get_application_log(TX_ID), "getapplicationlog", [TX_ID]),
    ("get_asset_state", lambda c: c.get_asset_state(ASSET), "getassetstate", [ASSET]),
    ("get_balance", lambda c: c.get_balance(ASSET), "getbalance", [ASSET]),
    ("get_best_block_hash", lambda c: c.get_best_block_hash(), "getbestblockhash", []),
    ("get_block_by_hash", lambda c: c.get_block_by_hash(BLOCK_HASH), "getblock", [BLOCK_HASH, 1]),
    ("get_block_by_index", lambda c: c.get_block_by_index(7), "getblock", [7, 1]),
    ("get_block_count", lambda c: c.get_block_count(), "getblockcount", []),
    ("get_block_hash", lambda c: c.get_block_hash(7), "getblockhash", [7]),
    (
        "get_block_header_by_hash",
        lambda c: c.get_block_header_by_hash(BLOCK_HASH),
        "getblockheader",
        [BLOCK_HASH, 1],
    ),
    ("get_claimable", lambda c: c.get_claimable(ADDRESS), "getclaimable", [ADDRESS]),
    ("get_connection_count", lambda c: c.get_connection_count(), "getconnectioncount", []),
    ("get_contract_state", lambda c: c.get_contract_state(CONTRACT), "getcontractstate", [CONTRACT]),
    ("get_nep5_balances", lambda c: c.get_nep5_balances(ADDRESS), "getnep5balances", [ADDRESS]),
    ("get_nep5_transfers", lambda c: c.get_nep5_transfers(ADDRESS), "getnep5transfers", [ADDRESS]),
    ("get_new_address", lambda c: c.get_new_address(), "getnewaddress", []),
    ("get_peers", lambda c: c.get_peers(), "getpeers", []),
    ("get_raw_mempool", lambda c: c.get_raw_mempool(), "getrawmempool", []),
    ("get_raw_transaction", lambda c: c.get_raw_transaction(TX_ID), "getrawtransaction", [TX_ID, 1]),
    ("get_storage", lambda c: c.get_storage(CONTRACT, "6b6579"), "getstorage", [CONTRACT, "6b6579"]),
    ("get_transaction_height", lambda c: c.get_transaction_height(TX_ID), "gettransactionheight", [TX_ID]),
    ("get_tx_out", lambda c: c.get_tx_out(TX_ID, 0), "gettxout", [TX_ID, 0]),
    ("get_unclaimed_gas", lambda c: c.get_unclaimed_gas(), "getunclaimedgas", []),
    ("get_unclaimed", lambda c: c.get_unclaimed(ADDRESS), "getunclaimed", [ADDRESS]),
    ("get_unspents", lambda c: c.get_unspents(ADDRESS), "getunspents", [ADDRESS]),
    ("get_validators", lambda c: c.get_validators(), "getvalidators", []),
    ("get_version", lambda c: c.get_version(), "getversion", []),
    ("get_wallet_height", lambda c: c.get_wallet_height(), "getwalletheight", []),
    ("import_priv_key", lambda c: c.import_priv_key("KxWIF"), "importprivkey", ["KxWIF"]),
    ("list_address", lambda c: c.list_address(), "listaddress", []),
    ("list_plugins", lambda c: c.list_plugins(), "listplugins", []),
    (
        "send_from",
        lambda c: c.send_from(ASSET, ADDRESS, "AOther", 10, 0.001, "AChange"),
        "sendfrom",
        [ASSET, ADDRESS, "AOther", 10, 0.001, "AChange"],
    ),
    (
        "send_from_defaults",
        lambda c: c.send_from(ASSET, ADDRESS, "AOther", 10),
        "sendfrom",
        [ASSET, ADDRESS, "AOther", 10, 0],
    ),
    (
        "send_from_explicit_null_fee",
        lambda c: c.send_from(ASSET, ADDRESS, "AOther", 10, None, "AChange"),
        "sendfrom",
        [ASSET, ADDRESS, "AOther", 10, None, "AChange"],
    ),
    (
        "send_to_address",
        lambda c: c.send_to_address(ASSET, "AOther", 5, 0, "AChange"),
        "sendtoaddress",
        [ASSET, "AOther", 5, 0, "AChange"],
    ),
    (
        "send_many",
        lambda c: c.send_many([{"asset": ASSET, "value": 1, "address": "AOther"}]),
        "sendmany",
        [[{"asset": ASSET, "value": 1, "address": "AOther"}], 0],
    ),
    ("send_raw_transaction", lambda c: c.send_raw_transaction("80000001"), "sendrawtransaction", ["80000001", 1]),
    ("submit_block", lambda c: c.submit_block("00000000"), "submitblock", ["00000000"]),
    ("validate_address", lambda c: c.validate_address(ADDRESS), "validateaddress", [ADDRESS]),
    (
        "invoke_script",
        lambda c: c.invoke_script("00c1046e616d65"),
        "invokescript",
        ["00c1046e616d65"],
    ),
    (
        "invoke_script_witness",
        lambda c: c.invoke_script("00", "0xabc"),
        "invokescript",
        ["00", "0xabc"],
    ),
    (
        "invoke_function_no_args",
        lambda c: c.invoke_function(CONTRACT, "name"),
        "invokefunction",
        [CONTRACT, "name"],
    ),
    (
        "invoke_function_args",
        lambda c: c.invoke_function(
            CONTRACT,
            "balanceOf",
            [ContractParameter.hash160(UInt160.from_string(CONTRACT))],
            "0xabc",
        ),
        "invokefunction",
        [CONTRACT, "balanceOf", [{"type": "Hash160", "value": CONTRACT}], "0xabc"],
    ),
    (
        "invoke_function_witness_only",
        lambda c: c.invoke_function(CONTRACT, "name", None, "0xabc"),
        "invokefunction",
        [CONTRACT, "name", [], "0xabc"],
    ),
    (
        "get_proof",
        lambda c: c.get_proof("0xroot", CONTRACT, "0102"),
        "getproof",
        ["0xroot", CONTRACT, "0102"],
    ),
    ("get_state_height", lambda c: c.get_state_height(), "getstateheight", []),
    ("get_state_root_by_index", lambda c: c.get_state_root_by_index(9), "getstateroot", [9]),
    (
        "get_state_root_by_hash",
        lambda c: c.get_state_root_by_hash(BLOCK_HASH),
        "getstateroot",
        [BLOCK_HASH],
    ),
]


class TestMethodParams:
    """Method names and positional params must match the node signature exactly."""

    @pytest.mark.parametrize(
        ("call", "method", "params"),
        [case[1:] for case in PARAM_CASES],
        ids=[case[0] for case in PARAM_CASES],
    )
    def test_wire_params(
        self,
        client: RpcClient,
        node: FakeNode,
        call: Callable[[RpcClient], Any],
        method: str,
        params: list[Any],
    ) -> None:
        result = call(client)

        assert node.last["method"] == method
        assert node.last["params"] == params
        # Nothing is configured on the node, so it answers null.
        assert result.ok or result.error.kind == ErrorKind.DECODE

    def test_header_by_index_resolves_hash_first(
        self, client: RpcClient, node: FakeNode
    ) -> None:
        node.reply("getblockhash", BLOCK_HASH)
        node.reply("getblockheader", _HEADER_JSON)

        result = client.get_block_header_by_index(12)

        assert result.ok
        assert result.value.index == 12
        assert [b["method"] for b in node.bodies] == ["getblockhash", "getblockheader"]
        assert node.bodies[0]["params"] == [12]
        assert node.bodies[1]["params"] == [BLOCK_HASH, 1]

    def test_header_by_index_stops_on_hash_failure(
        self, client: RpcClient, node: FakeNode
    ) -> None:
        node.reply_error("getblockhash", -100, "Invalid Height")

        result = client.get_block_header_by_index(99999999)

        assert not result.ok
        assert result.error.message == "Invalid Height"
        assert len(node.bodies) == 1


_HEADER_JSON = {
    "hash": BLOCK_HASH,
    "size": 676,
    "version": 0,
    "previousblockhash": "0x" + "00" * 32,
    "merkleroot": "0x" + "11" * 32,
    "time": 1468595301,
    "index": 12,
    "nonce": "2083236893",
    "nextconsensus": "APyEx5f4Zm4oCHwFWiSTaph1fPBxZacYVR",
    "script": {"invocation": "40", "verification": "51"},
    "confirmations": 100,
    "nextblockhash": "0x" + "22" * 32,
}


class TestFailures:
    """Every failure comes back as a Failure value, never an exception."""

    def test_node_error(self, client: RpcClient, node: FakeNode) -> None:
        node.reply_error("getblockhash", -100, "Invalid Height")

        result = client.get_block_hash(10**9)

        assert isinstance(result, Failure)
        assert result.error.kind == ErrorKind.NODE
        assert result.error.code == -100
        assert result.error.message == "Invalid Height"

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as rpc:
            result = rpc.get_block_count()

        assert not result.ok
        assert result.error.kind == ErrorKind.TRANSPORT
        assert "connection refused" in result.error.message

    def test_timeout_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with make_client(handler) as rpc:
            result = rpc.get_version()

        assert result.error.kind == ErrorKind.TRANSPORT

    def test_invalid_json(self) -> None:
        with make_client(lambda r: httpx.Response(200, text="<html>")) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.DECODE

    def test_http_error_without_json(self) -> None:
        with make_client(lambda r: httpx.Response(502, text="Bad Gateway")) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.TRANSPORT
        assert "502" in result.error.message

    def test_http_error_with_jsonrpc_body_is_node_error(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}}
        with make_client(lambda r: httpx.Response(500, json=body)) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.NODE
        assert result.error.message == "Method not found"

    def test_non_object_body(self) -> None:
        with make_client(lambda r: httpx.Response(200, json=[1, 2])) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.DECODE

    def test_missing_result(self) -> None:
        with make_client(lambda r: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.DECODE

    def test_result_shape_mismatch(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("getversion", {"nonce": 1})

        result = client.get_version()

        assert result.error.kind == ErrorKind.DECODE
        assert "getversion" in result.error.message

    def test_scalar_type_mismatch(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("getbestblockhash", 12)

        assert client.get_best_block_hash().error.kind == ErrorKind.DECODE

    def test_null_storage_is_none(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("getstorage", None)

        assert client.get_storage(CONTRACT, "00") == Success(None)

    @pytest.mark.parametrize("payload", [None, [], [1], "oops", 7])
    def test_non_object_version_result(
        self, client: RpcClient, node: FakeNode, payload: Any
    ) -> None:
        node.reply("getversion", payload)

        result = client.get_version()

        assert result.error.kind == ErrorKind.DECODE

    @pytest.mark.parametrize("payload", [None, [], "oops"])
    def test_non_object_invoke_result(
        self, client: RpcClient, node: FakeNode, payload: Any
    ) -> None:
        node.reply("invokescript", payload)

        assert client.invoke_script("00").error.kind == ErrorKind.DECODE

    def test_non_object_stack_entry(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("invokescript", {"state": "HALT", "stack": ["01"]})

        assert client.invoke_script("00").error.kind == ErrorKind.DECODE

    def test_empty_error_next_to_result_is_ignored(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "result": 42, "error": {"code": 0, "message": ""}}
        with make_client(lambda r: httpx.Response(200, json=body)) as rpc:
            assert rpc.get_block_count() == Success(42)

    def test_error_without_message_or_result_is_node_error(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -500}}
        with make_client(lambda r: httpx.Response(200, json=body)) as rpc:
            result = rpc.get_block_count()

        assert result.error.kind == ErrorKind.NODE
        assert result.error.code == -500

    def test_failure_is_logged(
        self, client: RpcClient, node: FakeNode, caplog: pytest.LogCaptureFixture
    ) -> None:
        node.reply_error("getpeers", -1, "boom")

        with caplog.at_level("WARNING", logger="neorpc.rpc.client"):
            client.get_peers()

        assert "getpeers" in caplog.text
        assert "boom" in caplog.text


class TestUnwrap:
    def test_success(self) -> None:
        assert Success(5).unwrap() == 5

    def test_node_error(self, client: RpcClient, node: FakeNode) -> None:
        node.reply_error("getblockcount", -32603, "Internal error")

        with pytest.raises(NodeError) as excinfo:
            client.get_block_count().unwrap()

        assert excinfo.value.code == -32603
        assert str(excinfo.value) == "Internal error"

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        with make_client(handler) as rpc:
            with pytest.raises(TransportError):
                rpc.get_block_count().unwrap()

    def test_decode_error(self) -> None:
        with make_client(lambda r: httpx.Response(200, text="nope")) as rpc:
            with pytest.raises(ResponseDecodeError):
                rpc.get_block_count().unwrap()

    def test_all_errors_are_runtime_errors(self, client: RpcClient, node: FakeNode) -> None:
        node.reply_error("getblockcount", 1, "x")
        with pytest.raises(RuntimeError):
            client.get_block_count().unwrap()


class TestRawCall:
    def test_request_body_is_json(self, client: RpcClient, node: FakeNode) -> None:
        node.reply("getconnectioncount", 8)
        client.get_connection_count()

        assert json.loads(node.requests[-1].content)["method"] == "getconnectioncount"


class TestParamsOrder:
    def test_only_trailing_none_dropped(self) -> None:
        method = methods.RpcMethod("sendfrom", str)

        assert method.params(("a", None, "b", None, None)) == ["a", None, "b"]

    def test_trailing_literals_follow_args(self) -> None:
        assert methods.GET_BLOCK.params(("0xabc", None)) == ["0xabc", 1]
