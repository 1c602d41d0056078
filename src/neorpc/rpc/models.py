"""
NEO 2.x RPC response payloads.

Each class mirrors the ``result`` object of one RPC method and is built with
``from_json``. Decoders raise ``KeyError``, ``TypeError``, ``ValueError`` or
``AttributeError`` (a list or scalar where an object belongs) on a
malformed payload; the client turns those into decode failures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


# ---------------------------------------------------------------------------
# Accounts and assets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Balance:
    asset: str
    value: Decimal


@dataclass(frozen=True)
class AccountState:
    """
    Response to `getaccountstate` RPC call.
    """

    version: int
    script_hash: str
    frozen: bool
    votes: list[str]
    balances: list[Balance]

    @classmethod
    def from_json(cls, json: dict) -> "AccountState":
        return cls(
            version=int(json["version"]),
            script_hash=json["script_hash"],
            frozen=bool(json["frozen"]),
            votes=list(json.get("votes", [])),
            balances=[
                Balance(b["asset"], _decimal(b["value"]))
                for b in json.get("balances", [])
            ],
        )


@dataclass(frozen=True)
class AssetState:
    """
    Response to `getassetstate` RPC call.
    """

    version: int
    id: str
    type: str
    names: dict[str, str]
    amount: Decimal
    available: Decimal
    precision: int
    owner: str
    admin: str
    issuer: str
    expiration: int
    frozen: bool

    @classmethod
    def from_json(cls, json: dict) -> "AssetState":
        raw_names = json.get("name", [])
        if isinstance(raw_names, str):
            names = {"": raw_names}
        else:
            names = {n["lang"]: n["name"] for n in raw_names}
        return cls(
            version=int(json["version"]),
            id=json["id"],
            type=json["type"],
            names=names,
            amount=_decimal(json["amount"]),
            available=_decimal(json["available"]),
            precision=int(json["precision"]),
            owner=json["owner"],
            admin=json["admin"],
            issuer=json["issuer"],
            expiration=int(json["expiration"]),
            frozen=bool(json["frozen"]),
        )


@dataclass(frozen=True)
class WalletBalance:
    """
    Response to `getbalance` RPC call (RpcWallet plugin).
    """

    balance: Decimal
    confirmed: Decimal

    @classmethod
    def from_json(cls, json: dict) -> "WalletBalance":
        return cls(_decimal(json["balance"]), _decimal(json["confirmed"]))


@dataclass(frozen=True)
class ContractState:
    """
    Response to `getcontractstate` RPC call.
    """

    version: int
    hash: str
    script: str
    parameters: list[str]
    return_type: str
    name: str
    code_version: str
    author: str
    email: str
    description: str
    storage: bool
    dynamic_invoke: bool

    @classmethod
    def from_json(cls, json: dict) -> "ContractState":
        props = json.get("properties", {})
        return cls(
            version=int(json["version"]),
            hash=json["hash"],
            script=json["script"],
            parameters=list(json.get("parameters", [])),
            return_type=json["returntype"],
            name=json["name"],
            code_version=json["code_version"],
            author=json["author"],
            email=json["email"],
            description=json["description"],
            storage=bool(props.get("storage", False)),
            dynamic_invoke=bool(props.get("dynamic_invoke", False)),
        )


# ---------------------------------------------------------------------------
# Blocks and transactions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Witness:
    invocation: str
    verification: str

    @classmethod
    def from_json(cls, json: dict) -> "Witness":
        return cls(json["invocation"], json["verification"])


@dataclass(frozen=True)
class TxAttribute:
    usage: str
    data: str


@dataclass(frozen=True)
class TxInput:
    txid: str
    vout: int


@dataclass(frozen=True)
class TxOutput:
    n: int
    asset: str
    value: Decimal
    address: str

    @classmethod
    def from_json(cls, json: dict) -> "TxOutput":
        return cls(int(json["n"]), json["asset"], _decimal(json["value"]), json["address"])


@dataclass(frozen=True)
class Transaction:
    """
    Verbose transaction, as returned by `getrawtransaction` and the wallet
    plugin's send/claim calls.

    ``block_hash``, ``confirmations`` and ``block_time`` are only present
    for transactions already in a block.
    """

    txid: str
    size: int
    type: str
    version: int
    attributes: list[TxAttribute]
    vin: list[TxInput]
    vout: list[TxOutput]
    sys_fee: Decimal
    net_fee: Decimal
    scripts: list[Witness]
    block_hash: Optional[str] = None
    confirmations: Optional[int] = None
    block_time: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)

    _KNOWN = frozenset({
        "txid", "size", "type", "version", "attributes", "vin", "vout",
        "sys_fee", "net_fee", "scripts", "blockhash", "confirmations", "blocktime",
    })

    @classmethod
    def from_json(cls, json: dict) -> "Transaction":
        return cls(
            txid=json["txid"],
            size=int(json["size"]),
            type=json["type"],
            version=int(json["version"]),
            attributes=[TxAttribute(a["usage"], a["data"]) for a in json.get("attributes", [])],
            vin=[TxInput(i["txid"], int(i["vout"])) for i in json.get("vin", [])],
            vout=[TxOutput.from_json(o) for o in json.get("vout", [])],
            sys_fee=_decimal(json.get("sys_fee", "0")),
            net_fee=_decimal(json.get("net_fee", "0")),
            scripts=[Witness.from_json(s) for s in json.get("scripts", [])],
            block_hash=json.get("blockhash"),
            confirmations=_opt_int(json.get("confirmations")),
            block_time=_opt_int(json.get("blocktime")),
            # type-specific fields (claims, script, gas, ...)
            extra={k: v for k, v in json.items() if k not in cls._KNOWN},
        )


@dataclass(frozen=True)
class BlockHeader:
    """
    Response to `getblockheader` RPC call (verbose).
    """

    hash: str
    size: int
    version: int
    previous_block_hash: str
    merkle_root: str
    time: int
    index: int
    nonce: str
    next_consensus: str
    script: Optional[Witness]
    confirmations: int
    next_block_hash: Optional[str]

    @classmethod
    def _fields_from_json(cls, json: dict) -> dict[str, Any]:
        script = json.get("script")
        return dict(
            hash=json["hash"],
            size=int(json["size"]),
            version=int(json["version"]),
            previous_block_hash=json["previousblockhash"],
            merkle_root=json["merkleroot"],
            time=int(json["time"]),
            index=int(json["index"]),
            nonce=str(json["nonce"]),
            next_consensus=json["nextconsensus"],
            script=Witness.from_json(script) if script else None,
            confirmations=int(json.get("confirmations", 0)),
            next_block_hash=json.get("nextblockhash"),
        )

    @classmethod
    def from_json(cls, json: dict) -> "BlockHeader":
        return cls(**cls._fields_from_json(json))


@dataclass(frozen=True)
class Block(BlockHeader):
    """
    Response to `getblock` RPC call (verbose).
    """

    tx: list[Transaction] = field(default_factory=list)

    @classmethod
    def from_json(cls, json: dict) -> "Block":
        return cls(
            **cls._fields_from_json(json),
            tx=[Transaction.from_json(t) for t in json.get("tx", [])],
        )


@dataclass(frozen=True)
class ClaimableEntry:
    txid: str
    n: int
    value: Decimal
    start_height: int
    end_height: int
    generated: Decimal
    sys_fee: Decimal
    unclaimed: Decimal


@dataclass(frozen=True)
class Claimable:
    """
    Response to `getclaimable` RPC call.
    """

    claimable: list[ClaimableEntry]
    address: str
    unclaimed: Decimal

    @classmethod
    def from_json(cls, json: dict) -> "Claimable":
        entries = [
            ClaimableEntry(
                txid=c["txid"],
                n=int(c["n"]),
                value=_decimal(c["value"]),
                start_height=int(c["start_height"]),
                end_height=int(c["end_height"]),
                generated=_decimal(c["generated"]),
                sys_fee=_decimal(c["sys_fee"]),
                unclaimed=_decimal(c["unclaimed"]),
            )
            for c in json.get("claimable", [])
        ]
        return cls(entries, json["address"], _decimal(json["unclaimed"]))


@dataclass(frozen=True)
class UnclaimedGas:
    """
    Response to `getunclaimedgas` RPC call (RpcWallet plugin).
    """

    available: Decimal
    unavailable: Decimal

    @classmethod
    def from_json(cls, json: dict) -> "UnclaimedGas":
        return cls(_decimal(json["available"]), _decimal(json["unavailable"]))


@dataclass(frozen=True)
class Unclaimed:
    """
    Response to `getunclaimed` RPC call.
    """

    available: Decimal
    unavailable: Decimal
    unclaimed: Decimal

    @classmethod
    def from_json(cls, json: dict) -> "Unclaimed":
        return cls(
            _decimal(json["available"]),
            _decimal(json["unavailable"]),
            _decimal(json["unclaimed"]),
        )


@dataclass(frozen=True)
class Unspent:
    txid: str
    n: int
    value: Decimal


@dataclass(frozen=True)
class UnspentBalance:
    asset_hash: str
    asset: str
    asset_symbol: str
    amount: Decimal
    unspent: list[Unspent]


@dataclass(frozen=True)
class Unspents:
    """
    Response to `getunspents` RPC call.
    """

    balance: list[UnspentBalance]
    address: str

    @classmethod
    def from_json(cls, json: dict) -> "Unspents":
        balances = [
            UnspentBalance(
                asset_hash=b["asset_hash"],
                asset=b["asset"],
                asset_symbol=b["asset_symbol"],
                amount=_decimal(b["amount"]),
                unspent=[
                    Unspent(u["txid"], int(u["n"]), _decimal(u["value"]))
                    for u in b.get("unspent", [])
                ],
            )
            for b in json.get("balance", [])
        ]
        return cls(balances, json["address"])


# ---------------------------------------------------------------------------
# NEP-5 tracker
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Nep5Balance:
    asset_hash: str
    amount: int
    last_updated_block: int


@dataclass(frozen=True)
class Nep5Balances:
    """
    Response to `getnep5balances` RPC call (RpcNep5Tracker plugin).
    """

    balances: list[Nep5Balance]
    address: str

    @classmethod
    def from_json(cls, json: dict) -> "Nep5Balances":
        balances = [
            Nep5Balance(b["asset_hash"], int(b["amount"]), int(b["last_updated_block"]))
            for b in json.get("balance", [])
        ]
        return cls(balances, json["address"])


@dataclass(frozen=True)
class Nep5Transfer:
    timestamp: int
    asset_hash: str
    transfer_address: str
    amount: int
    block_index: int
    transfer_notify_index: int
    tx_hash: str

    @classmethod
    def from_json(cls, json: dict) -> "Nep5Transfer":
        return cls(
            timestamp=int(json["timestamp"]),
            asset_hash=json["asset_hash"],
            transfer_address=json["transfer_address"],
            amount=int(json["amount"]),
            block_index=int(json["block_index"]),
            transfer_notify_index=int(json["transfer_notify_index"]),
            tx_hash=json["tx_hash"],
        )


@dataclass(frozen=True)
class Nep5Transfers:
    """
    Response to `getnep5transfers` RPC call (RpcNep5Tracker plugin).
    """

    sent: list[Nep5Transfer]
    received: list[Nep5Transfer]
    address: str

    @classmethod
    def from_json(cls, json: dict) -> "Nep5Transfers":
        return cls(
            sent=[Nep5Transfer.from_json(t) for t in json.get("sent", [])],
            received=[Nep5Transfer.from_json(t) for t in json.get("received", [])],
            address=json["address"],
        )


# ---------------------------------------------------------------------------
# Node and network
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Peer:
    address: str
    port: int


@dataclass(frozen=True)
class Peers:
    """
    Response to `getpeers` RPC call.
    """

    connected: list[Peer]
    bad: list[Peer]
    unconnected: list[Peer]

    @classmethod
    def from_json(cls, json: dict) -> "Peers":
        def _peers(key: str) -> list[Peer]:
            return [Peer(p["address"], int(p["port"])) for p in json.get(key, [])]

        return cls(_peers("connected"), _peers("bad"), _peers("unconnected"))


@dataclass(frozen=True)
class Validator:
    public_key: str
    votes: int
    active: bool

    @classmethod
    def from_json(cls, json: dict) -> "Validator":
        return cls(json["publickey"], int(json["votes"]), bool(json["active"]))


@dataclass(frozen=True)
class Version:
    """
    Response to `getversion` RPC call.
    """

    port: int
    nonce: int
    user_agent: str

    @classmethod
    def from_json(cls, json: dict) -> "Version":
        return cls(int(json.get("tcpport", json.get("port", 0))), int(json["nonce"]), json["useragent"])


@dataclass(frozen=True)
class Plugin:
    name: str
    version: str
    interfaces: list[str]

    @classmethod
    def from_json(cls, json: dict) -> "Plugin":
        return cls(json["name"], json["version"], list(json.get("interfaces", [])))


@dataclass(frozen=True)
class WalletAddress:
    """
    Entry of `listaddress`, also the response to `importprivkey`.
    """

    address: str
    has_key: bool
    label: Optional[str]
    watch_only: bool

    @classmethod
    def from_json(cls, json: dict) -> "WalletAddress":
        return cls(
            json["address"],
            bool(json["haskey"]),
            json.get("label"),
            bool(json["watchonly"]),
        )


@dataclass(frozen=True)
class ValidateAddress:
    """
    Response to `validateaddress` RPC call.
    """

    address: str
    is_valid: bool

    @classmethod
    def from_json(cls, json: dict) -> "ValidateAddress":
        return cls(json["address"], bool(json["isvalid"]))


# ---------------------------------------------------------------------------
# Script execution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StackItem:
    """
    One value left on the VM evaluation stack.

    ``value`` is whatever the node printed: hex text for ByteArray, decimal
    text for Integer, a JSON boolean for Boolean, a list for Array.
    """

    type: str
    value: Any

    @classmethod
    def from_json(cls, json: dict) -> "StackItem":
        value = json.get("value")
        if isinstance(value, list):
            value = [cls.from_json(v) if isinstance(v, dict) else v for v in value]
        return cls(json["type"], value)


@dataclass(frozen=True)
class InvokeResult:
    """
    Response to `invokescript` / `invokefunction` RPC calls.
    """

    script: str
    state: str
    gas_consumed: Decimal
    stack: list[StackItem]

    @property
    def faulted(self) -> bool:
        return "FAULT" in self.state

    @classmethod
    def from_json(cls, json: dict) -> "InvokeResult":
        return cls(
            script=json.get("script", ""),
            state=json["state"],
            gas_consumed=_decimal(json.get("gas_consumed", "0")),
            stack=[StackItem.from_json(s) for s in json.get("stack") or []],
        )


@dataclass(frozen=True)
class Notification:
    contract: str
    state: Optional[StackItem]

    @classmethod
    def from_json(cls, json: dict) -> "Notification":
        state = json.get("state")
        return cls(json["contract"], StackItem.from_json(state) if state else None)


@dataclass(frozen=True)
class Execution:
    trigger: str
    contract: str
    vm_state: str
    gas_consumed: Decimal
    stack: list[StackItem]
    notifications: list[Notification]

    @classmethod
    def from_json(cls, json: dict) -> "Execution":
        return cls(
            trigger=json["trigger"],
            contract=json.get("contract", ""),
            vm_state=json["vmstate"],
            gas_consumed=_decimal(json.get("gas_consumed", "0")),
            stack=[StackItem.from_json(s) for s in json.get("stack") or []],
            notifications=[Notification.from_json(n) for n in json.get("notifications", [])],
        )


@dataclass(frozen=True)
class ApplicationLog:
    """
    Response to `getapplicationlog` RPC call (ApplicationLogs plugin).
    """

    txid: str
    executions: list[Execution]

    @classmethod
    def from_json(cls, json: dict) -> "ApplicationLog":
        return cls(json["txid"], [Execution.from_json(e) for e in json.get("executions", [])])


# ---------------------------------------------------------------------------
# State root (cross-chain verification)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StateHeight:
    """
    Response to `getstateheight` RPC call.
    """

    block_height: int
    state_height: int

    @classmethod
    def from_json(cls, json: dict) -> "StateHeight":
        return cls(int(json["blockheight"]), int(json["stateheight"]))


@dataclass(frozen=True)
class StateRoot:
    version: int
    index: int
    pre_hash: str
    state_root: str
    witness: Optional[Witness]


@dataclass(frozen=True)
class StateRootState:
    """
    Response to `getstateroot` RPC call.
    """

    flag: str
    state_root: StateRoot

    @classmethod
    def from_json(cls, json: dict) -> "StateRootState":
        root = json["stateroot"]
        witness = root.get("witness")
        return cls(
            flag=json["flag"],
            state_root=StateRoot(
                version=int(root["version"]),
                index=int(root["index"]),
                pre_hash=root["prehash"],
                state_root=root["stateroot"],
                witness=Witness.from_json(witness) if witness else None,
            ),
        )


@dataclass(frozen=True)
class CrossChainProof:
    """
    Response to `getproof` RPC call.

    Nodes answer either with the bare hex proof or ``{"proof": ...}``.
    """

    proof: str

    @classmethod
    def from_json(cls, json: Any) -> "CrossChainProof":
        if isinstance(json, str):
            return cls(json)
        return cls(json["proof"])
