"""Shared pytest fixtures for linktum-deployments tests."""

import itertools
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import responses

RPC_URL = "http://test-rpc.example.com"

# Hardhat default account #0
PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# Addresses a fresh Hardhat node assigns to the first two deployments
CONTRACT_ADDRESSES = [
    "0x5FbDB2315678afecb367f032d93F642f64180aa3",
    "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512",
]

BYTECODE = "0x6080604052348015600f57600080fd5b50"

NO_ARG_CONSTRUCTOR = {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}


def write_artifact(
    artifacts_dir: Path,
    name: str,
    abi: Optional[List[Dict[str, Any]]] = None,
    bytecode: str = BYTECODE,
    source: Optional[str] = None,
) -> Path:
    """Write a Hardhat-style artifact file and return its path."""
    source = source or f"contracts/{name}.sol"
    path = artifacts_dir / source / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": source,
        "abi": abi if abi is not None else [NO_ARG_CONSTRUCTOR],
        "bytecode": bytecode,
        "deployedBytecode": "0x6080",
        "linkReferences": {},
        "deployedLinkReferences": {},
    }
    path.write_text(json.dumps(data))
    return path


class FakeNode:
    """
    Simulates an Ethereum JSON-RPC node behind `responses`.

    Every call is recorded in `calls` as (method, params). Set `errors[method]`
    to an error object to make that method fail, and `pending_polls` to the
    number of null receipts returned before each receipt appears.
    """

    def __init__(self, chain_id: int = 11155111, eip1559: bool = True):
        self.chain_id = chain_id
        self.eip1559 = eip1559
        self.balance = 10**18
        self.accounts = [DEPLOYER_ADDRESS]
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.pending_polls = 0
        self.receipt_status = "0x1"
        self.max_submissions: Optional[int] = None
        self.calls: List[tuple] = []
        self.sent: List[Any] = []
        self._addresses = iter(CONTRACT_ADDRESSES)
        self._hashes = (f"0x{n:064x}" for n in itertools.count(1))
        self._receipts: Dict[str, Dict[str, Any]] = {}
        self._polls: Dict[str, int] = {}

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]

    def callback(self, request):
        body = json.loads(request.body)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))

        if method in self.errors:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]}
        elif self._rejects(method):
            error = {"code": -32000, "message": "nonce too low"}
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": error}
        else:
            payload = {"jsonrpc": "2.0", "id": body["id"], "result": self._result(method, params)}
        return (200, {}, json.dumps(payload))

    def _rejects(self, method: str) -> bool:
        return (
            method in ("eth_sendRawTransaction", "eth_sendTransaction")
            and self.max_submissions is not None
            and len(self.sent) >= self.max_submissions
        )

    def _submit(self, raw: Any) -> str:
        self.sent.append(raw)
        tx_hash = next(self._hashes)
        self._receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "status": self.receipt_status,
            "contractAddress": next(self._addresses).lower(),
            "blockNumber": hex(len(self._receipts) + 1),
            "gasUsed": "0x1e8480",
        }
        return tx_hash

    def _result(self, method: str, params: List[Any]) -> Any:
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "eth_accounts":
            return self.accounts
        if method == "eth_getBalance":
            return hex(self.balance)
        if method == "eth_getTransactionCount":
            return hex(len(self.sent))
        if method == "eth_estimateGas":
            return hex(1_000_000)
        if method == "eth_gasPrice":
            return hex(2_000_000_000)
        if method == "eth_maxPriorityFeePerGas":
            return hex(1_000_000_000)
        if method == "eth_getBlockByNumber":
            block: Dict[str, Any] = {"number": hex(len(self._receipts))}
            if self.eip1559:
                block["baseFeePerGas"] = hex(7)
            return block
        if method in ("eth_sendRawTransaction", "eth_sendTransaction"):
            return self._submit(params[0])
        if method == "eth_getTransactionReceipt":
            tx_hash = params[0]
            polls = self._polls.get(tx_hash, 0)
            self._polls[tx_hash] = polls + 1
            if polls < self.pending_polls:
                return None
            return self._receipts.get(tx_hash)
        raise AssertionError(f"Unexpected RPC method {method}")


@pytest.fixture
def fake_node():
    """Serve a FakeNode at RPC_URL for the duration of the test."""
    node = FakeNode()
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add_callback(
            responses.POST, RPC_URL, callback=node.callback, content_type="application/json"
        )
        yield node


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Create an artifacts tree with TokenICO and LINKTUM."""
    artifacts = tmp_path / "artifacts"
    write_artifact(artifacts, "TokenICO")
    write_artifact(artifacts, "LINKTUM")
    return artifacts


@pytest.fixture
def deployments_dir(tmp_path: Path) -> Path:
    """Return a (not yet created) deployment records directory."""
    return tmp_path / "deployments"
