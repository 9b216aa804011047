"""JSON-RPC client for linktum-deployments library."""

import itertools
import logging
from typing import Any, Dict, List, Optional, Union

import requests

from .constants import CHAIN_NAMES, DEFAULT_REQUEST_TIMEOUT, UNKNOWN_NETWORK
from .exceptions import NodeConnectionError, RPCError
from .types import NetworkInfo

logger = logging.getLogger(__name__)


def network_name(chain_id: int) -> str:
    """
    Get the conventional network name for a chain id.

    Args:
        chain_id: EIP-155 chain id

    Returns:
        Network name, or "unknown" for chains not in CHAIN_NAMES
    """
    return CHAIN_NAMES.get(chain_id, UNKNOWN_NETWORK)


class JsonRpcClient:
    """Minimal Ethereum JSON-RPC 2.0 client over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._ids = itertools.count(1)

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a single JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_chainId")
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            NodeConnectionError: If the node is unreachable or answers non-JSON
            RPCError: If the node returns an error object
        """
        request_id = next(self._ids)
        logger.debug("RPC %s #%d %s", method, request_id, params)
        try:
            response = self._session.post(
                self.url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params or [],
                    "id": request_id,
                },
                timeout=self.timeout,
            )

            # Check for HTTP errors
            if response.status_code != 200:
                raise NodeConnectionError(
                    f"RPC request {method} to {self.url} failed with status "
                    f"{response.status_code}"
                )

            result = response.json()
        except requests.RequestException as e:
            raise NodeConnectionError(f"Network error during RPC call {method}: {e}") from e

        # Check for RPC errors
        if "error" in result:
            error = result["error"]
            if isinstance(error, dict):
                raise RPCError(
                    f"RPC error in {method}: {error.get('message', 'unknown error')}",
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RPCError(f"RPC error in {method}: {error}")

        return result.get("result")

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "JsonRpcClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # eth_* wrappers

    def chain_id(self) -> int:
        return int(self.call("eth_chainId"), 16)

    def get_network(self) -> NetworkInfo:
        chain_id = self.chain_id()
        return NetworkInfo(name=network_name(chain_id), chain_id=chain_id)

    def accounts(self) -> List[str]:
        return self.call("eth_accounts") or []

    def get_balance(self, address: str, block: str = "latest") -> int:
        return int(self.call("eth_getBalance", [address, block]), 16)

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return int(self.call("eth_getTransactionCount", [address, block]), 16)

    def gas_price(self) -> int:
        return int(self.call("eth_gasPrice"), 16)

    def max_priority_fee(self) -> int:
        return int(self.call("eth_maxPriorityFeePerGas"), 16)

    def get_block(self, block: str = "latest") -> Dict[str, Any]:
        return self.call("eth_getBlockByNumber", [block, False])

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        return int(self.call("eth_estimateGas", [transaction]), 16)

    def send_raw_transaction(self, raw_transaction: Union[bytes, str]) -> str:
        if isinstance(raw_transaction, bytes):
            raw_transaction = "0x" + bytes(raw_transaction).hex()
        return self.call("eth_sendRawTransaction", [raw_transaction])

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        return self.call("eth_sendTransaction", [transaction])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Return the receipt, or None while the transaction is pending."""
        return self.call("eth_getTransactionReceipt", [tx_hash])
