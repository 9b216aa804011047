"""Transaction signers for linktum-deployments library."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from .config import DeployConfig
from .constants import GAS_ESTIMATE_MARGIN
from .exceptions import SignerNotFoundError
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)


class Signer(ABC):
    """An account able to authorize deployment transactions."""

    def __init__(self, address: str, rpc: JsonRpcClient, gas_limit: Optional[int] = None):
        self.address = to_checksum_address(address)
        self.rpc = rpc
        self.gas_limit = gas_limit

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"

    def get_balance(self) -> int:
        """Get the account balance in wei."""
        return self.rpc.get_balance(self.address)

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        """
        Get the gas limit for a transaction.

        Uses the configured gas limit if set, otherwise the node's estimate
        plus a safety margin.
        """
        if self.gas_limit is not None:
            return self.gas_limit
        estimate = self.rpc.estimate_gas(_to_rpc(transaction, self.address))
        logger.debug("Gas estimate for %s: %d", self.address, estimate)
        return int(estimate * GAS_ESTIMATE_MARGIN)

    @abstractmethod
    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """
        Submit a transaction from this account.

        Args:
            transaction: Fields with int values and 0x-hex "data"

        Returns:
            Transaction hash
        """


class LocalSigner(Signer):
    """Signs transactions locally with a private key."""

    def __init__(self, account: LocalAccount, rpc: JsonRpcClient, gas_limit: Optional[int] = None):
        super().__init__(account.address, rpc, gas_limit)
        self._account = account

    @classmethod
    def from_key(
        cls, private_key: str, rpc: JsonRpcClient, gas_limit: Optional[int] = None
    ) -> "LocalSigner":
        return cls(Account.from_key(private_key), rpc, gas_limit)

    def populate_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fill nonce, chain id, gas and fee fields.

        EIP-1559 fees are used when the latest block carries a base fee,
        legacy gas price otherwise.
        """
        tx = dict(transaction)
        tx.setdefault("value", 0)
        tx.setdefault("nonce", self.rpc.get_transaction_count(self.address))
        tx.setdefault("chainId", self.rpc.chain_id())
        if "gas" not in tx:
            tx["gas"] = self.estimate_gas(tx)

        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            base_fee = self.rpc.get_block("latest").get("baseFeePerGas")
            if base_fee is not None:
                priority_fee = self.rpc.max_priority_fee()
                tx["maxPriorityFeePerGas"] = priority_fee
                tx["maxFeePerGas"] = 2 * int(base_fee, 16) + priority_fee
            else:
                tx["gasPrice"] = self.rpc.gas_price()

        return tx

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        tx = self.populate_transaction(transaction)
        signed = self._account.sign_transaction(tx)
        tx_hash = self.rpc.send_raw_transaction(signed.raw_transaction)
        logger.info("Sent transaction %s (nonce %d)", tx_hash, tx["nonce"])
        return tx_hash


class NodeSigner(Signer):
    """Uses an account managed and unlocked by the node (Hardhat, Anvil)."""

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        tx = dict(transaction)
        if self.gas_limit is not None:
            tx.setdefault("gas", self.gas_limit)
        tx_hash = self.rpc.send_transaction(_to_rpc(tx, self.address))
        logger.info("Sent transaction %s via node account", tx_hash)
        return tx_hash


def resolve_signer(config: DeployConfig, rpc: JsonRpcClient) -> Signer:
    """
    Get the deployer signer.

    A configured private key takes precedence; otherwise the first account
    the node exposes is used.

    Raises:
        SignerNotFoundError: If no private key is set and the node has no accounts
    """
    if config.private_key is not None:
        return LocalSigner.from_key(config.private_key, rpc, config.gas_limit)

    accounts = rpc.accounts()
    if not accounts:
        raise SignerNotFoundError(
            "No signer available: set PRIVATE_KEY or connect to a node with unlocked accounts"
        )
    return NodeSigner(accounts[0], rpc, config.gas_limit)


def _to_rpc(transaction: Dict[str, Any], sender: str) -> Dict[str, Any]:
    """Convert int fields to JSON-RPC hex quantities."""
    result: Dict[str, Any] = {"from": sender}
    for key, value in transaction.items():
        if key in ("chainId", "nonce"):
            # Filled by the node
            continue
        result[key] = hex(value) if isinstance(value, int) else value
    return result
